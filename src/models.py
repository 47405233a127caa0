from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class Rarity(str, Enum):
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"
    MYTHIC = "MYTHIC"
    SPECIAL = "SPECIAL"


class ItemType(str, Enum):
    SWORD = "SWORD"
    BOW = "BOW"
    ARMOR = "ARMOR"
    ACCESSORY = "ACCESSORY"
    CONSUMABLE = "CONSUMABLE"
    MISC = "MISC"


class _Model(BaseModel):
    # Serialized with camelCase keys (manaCost, isUnbreakable, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ItemStat(_Model):
    regular: Number
    dungeon: Optional[Number] = None


class ItemCharges(_Model):
    current: int
    maximum: int
    recharge_time: str


class ItemAbility(_Model):
    name: str
    description: str = ""
    mana_cost: Optional[Number] = None
    cooldown: Optional[str] = None
    soulflow_cost: Optional[Number] = None
    charges: Optional[ItemCharges] = None


class ItemFlags(_Model):
    is_unbreakable: bool = False
    is_dungeon_item: bool = False
    is_coop_soulbound: bool = False
    is_starred: bool = False
    has_hot_potato_books: int = 0


class ParsedItem(_Model):
    id: str
    name: str = "Unknown Item"
    description: str = ""
    rarity: Rarity = Rarity.COMMON
    type: ItemType = ItemType.MISC
    count: int = 1
    stats: Optional[Dict[str, ItemStat]] = None
    ability: Optional[ItemAbility] = None
    flags: ItemFlags = Field(default_factory=ItemFlags)
    modifier: Optional[str] = None
    runes: Optional[Dict[str, Number]] = None
    uuid: Optional[str] = None
    enchantments: Optional[Dict[str, Number]] = None


class InventoryResult(_Model):
    items: List[ParsedItem] = Field(default_factory=list)
