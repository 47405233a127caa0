import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from hypixel import HypixelClient, Member
from inventory_cache import InventoryCache
from item_parser import parse_inventory
from models import InventoryResult
from NBT_Decoder import ItemDecoder

logger = logging.getLogger(__name__)


class InventoryNotFoundError(LookupError):
    pass


class InventoryService:
    """
    Serves parsed inventories for a player's profile.

    Member data is read from the cache first; on a miss it is fetched from
    Hypixel and stored for `default_ttl` seconds.
    """

    def __init__(self, cache: InventoryCache, client: HypixelClient, default_ttl: Optional[float] = None):
        self.cache = cache
        self.client = client
        self.default_ttl = default_ttl

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn, *args)

    async def refresh(self, player_uuid: str, profile_uuid: str, ttl: Optional[float] = None) -> Member:
        """Fetch the member from Hypixel and overwrite the cached copy."""
        member = await self.client.get_member(player_uuid, profile_uuid)
        ttl = self.default_ttl if ttl is None else ttl
        await self._run(self.cache.insert, player_uuid, profile_uuid, member.model_dump_json(), ttl)
        logger.info("[Cache] Refreshed %s/%s", player_uuid, profile_uuid)
        return member

    async def get_member(self, player_uuid: str, profile_uuid: str) -> Member:
        cached = await self._run(self.cache.get, player_uuid, profile_uuid)
        if cached is not None:
            try:
                member = Member.model_validate_json(cached)
            except ValidationError as e:
                logger.warning("[Cache] Dropping unreadable entry %s/%s: %s", player_uuid, profile_uuid, e)
                await self._run(self.cache.delete, player_uuid, profile_uuid)
            else:
                logger.debug("[Cache] Hit for %s/%s", player_uuid, profile_uuid)
                return member
        else:
            logger.debug("[Cache] Miss for %s/%s", player_uuid, profile_uuid)
        return await self.refresh(player_uuid, profile_uuid)

    async def get_inventory(self, player_uuid: str, profile_uuid: str, section: str) -> InventoryResult:
        member = await self.get_member(player_uuid, profile_uuid)
        data = member.inventory_data(section)
        if not data:
            raise InventoryNotFoundError(f"Cannot find {section} data; player may not have enabled API")

        # decoding and parsing are CPU bound, keep them off the event loop
        return await self._run(_decode_and_parse, data)


def _decode_and_parse(data: str) -> InventoryResult:
    return parse_inventory(ItemDecoder.decode_inventory(data))
