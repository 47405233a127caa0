import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import aiohttp
from aiohttp import ClientSession
from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

PROFILES_URL = "https://api.hypixel.net/v2/skyblock/profiles"


class HypixelAPIError(RuntimeError):
    pass


class ProfileNotFoundError(LookupError):
    pass


# -----------------------------
# PROFILE PAYLOAD
# -----------------------------

class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow")


class InventoryBlob(_Payload):
    data: str


class BagContents(_Payload):
    talisman_bag: Optional[InventoryBlob] = None


class MemberInventory(_Payload):
    inv_contents: Optional[InventoryBlob] = None
    ender_chest_contents: Optional[InventoryBlob] = None
    bag_contents: Optional[BagContents] = None


class Member(_Payload):
    inventory: Optional[MemberInventory] = None

    def inventory_data(self, section: str) -> Optional[str]:
        """Base64 NBT blob for an inventory section, or None if the API hides it."""
        if section not in INVENTORY_SECTIONS:
            raise KeyError(section)
        node: Any = self.inventory
        for attr in INVENTORY_SECTIONS[section]:
            node = getattr(node, attr, None)
            if node is None:
                return None
        return node.data


class Profile(_Payload):
    profile_id: str
    members: Dict[str, Member]


class PlayerData(_Payload):
    profiles: Optional[List[Profile]] = None


# section name -> attribute path inside Member.inventory
INVENTORY_SECTIONS: Dict[str, Tuple[str, ...]] = {
    "inventory": ("inv_contents",),
    "enderchest": ("ender_chest_contents",),
    "accessorybag": ("bag_contents", "talisman_bag"),
}


def resolve_profile(data: PlayerData, player_uuid: str, profile_uuid: str) -> Tuple[Profile, Member]:
    """Find the profile and the player's membership in it. Member keys are undashed uuids."""
    profile = next((p for p in data.profiles or [] if p.profile_id == profile_uuid), None)
    member = profile.members.get(player_uuid.replace("-", "")) if profile else None
    if profile is None or member is None:
        raise ProfileNotFoundError(f"Player does not have profile {profile_uuid}")
    return profile, member


# -----------------------------
# HTTP CLIENT
# -----------------------------

class HypixelClient:
    def __init__(self, api_key: Optional[str], session: Optional[ClientSession] = None,
                 retries: int = 5, delay: float = 2):
        self.api_key = api_key
        self.retries = retries
        self.delay = delay
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=30, sock_connect=10, sock_read=20)
            self._session = ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def fetch_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """Fetch JSON data, retrying rate limits and connection errors with linear backoff."""
        session = await self._get_session()
        headers = {"API-Key": self.api_key} if self.api_key else {}

        for attempt in range(self.retries):
            try:
                async with session.get(url, params=params, headers=headers) as response:
                    if response.status == 200:
                        try:
                            return await response.json()
                        except (ValueError, aiohttp.ContentTypeError) as e:
                            raise HypixelAPIError(f"Hypixel API returned invalid JSON: {e}") from e
                    elif response.status == 429:
                        wait_time = self.delay * (attempt + 1)
                        logger.warning("[API] Rate limited (429). Waiting %.2fs before retry...", wait_time)
                        await asyncio.sleep(wait_time)
                    elif response.status >= 500:
                        logger.warning("[API] Request failed with status %d, retrying...", response.status)
                        await asyncio.sleep(self.delay * (attempt + 1))
                    else:
                        raise HypixelAPIError(f"Hypixel API returned status {response.status}")
            except aiohttp.ClientError as e:
                logger.error("[API] Exception during request: %s", e)
                await asyncio.sleep(self.delay * (attempt + 1))

        raise HypixelAPIError(f"Failed to fetch {url} after {self.retries} retries")

    async def fetch_profiles(self, player_uuid: str) -> PlayerData:
        raw = await self.fetch_json(PROFILES_URL, params={"uuid": player_uuid})
        try:
            return PlayerData.model_validate(raw)
        except ValidationError as e:
            raise HypixelAPIError(f"Unexpected profiles payload: {e}") from e

    async def get_member(self, player_uuid: str, profile_uuid: str) -> Member:
        data = await self.fetch_profiles(player_uuid)
        _, member = resolve_profile(data, player_uuid, profile_uuid)
        return member
