"""Property directory: the residential communities trips are booked from."""

import logging
from typing import Optional

from shuttle.schemas.property import PropertyCreate, PropertyRead
from shuttle.services.store import Store

logger = logging.getLogger(__name__)


class PropertyDirectory:
    """Service for properties."""

    def __init__(self, store: Store):
        self.store = store

    async def create(self, data: PropertyCreate) -> PropertyRead:
        prop = await self.store.create_property(data)
        logger.info(f"[PROPERTY] Created property {prop.id} ({prop.slug})")
        return prop

    async def get(self, property_id: int) -> Optional[PropertyRead]:
        return await self.store.get_property(property_id)

    async def get_by_slug(self, slug: str) -> Optional[PropertyRead]:
        return await self.store.get_property_by_slug(slug)

    async def list_all(self) -> list[PropertyRead]:
        return await self.store.list_properties()
