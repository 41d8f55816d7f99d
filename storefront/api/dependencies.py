"""FastAPI dependencies shared by the routers."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.listing import ListingEngine
from storefront.catalog.service import CatalogService
from storefront.catalog.store import SqlCatalogStore
from storefront.infrastructure.database import get_session, get_session_factory


def get_listing_engine() -> ListingEngine:
    """Listing engine over the current session factory.

    The engine opens one session per store query so its reads can run
    concurrently; it does not share the request session.
    """
    return ListingEngine(SqlCatalogStore(get_session_factory()))


async def get_catalog_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AsyncGenerator[CatalogService, None]:
    yield CatalogService(session)


ListingEngineDep = Annotated[ListingEngine, Depends(get_listing_engine)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
