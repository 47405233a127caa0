import logging
from typing import Any, Dict, List, Optional, Sequence

from lore_parsers import parse_ability, parse_rarity, parse_stats, parse_type
from models import InventoryResult, ItemFlags, ParsedItem
from tags import TagNode, get_compound, get_number, get_string, get_string_list, lookup
from text_utils import clean

logger = logging.getLogger(__name__)

UNKNOWN_ITEM_NAME = "Unknown Item"
STAR_GLYPH = "✪"


class InventoryFormatError(ValueError):
    """The inventory payload as a whole is not a list of item slots."""


def _numeric_mapping(entries: Optional[Dict[str, TagNode]]) -> Optional[Dict[str, Any]]:
    if entries is None:
        return None
    values = {name: get_number(node) for name, node in entries.items()}
    return {name: value for name, value in values.items() if value is not None}


def parse_item(node: Optional[TagNode]) -> Optional[ParsedItem]:
    """
    Build a ParsedItem from a single inventory slot.

    Slots without a SkyBlock id, a display section or a lore list are
    returned as None: empty slots and vanilla/menu items look like this.
    """
    if node is None or node.kind != "compound":
        return None

    extra = lookup(node, "tag.ExtraAttributes")
    display = get_compound(node, "tag.display")
    lore = get_string_list(node, "tag.display.Lore")
    item_id = get_string(extra, "id")
    if not item_id or display is None or lore is None:
        return None

    raw_name = get_string(node, "tag.display.Name")
    count = get_number(node, "Count")
    unbreakable = get_number(node, "tag.Unbreakable")
    hot_potato = get_number(extra, "hot_potato_count")

    return ParsedItem(
        id=item_id,
        name=clean(raw_name) if raw_name is not None else UNKNOWN_ITEM_NAME,
        description=clean("\n".join(lore)),
        rarity=parse_rarity(lore),
        type=parse_type(item_id, lore),
        count=int(count) if count is not None else 1,
        stats=parse_stats(lore),
        ability=parse_ability(lore),
        flags=ItemFlags(
            is_unbreakable=bool(unbreakable),
            is_dungeon_item="DUNGEON" in item_id or any("DUNGEON" in line for line in lore),
            is_coop_soulbound=any("Co-op Soulbound" in line for line in lore),
            is_starred=STAR_GLYPH in (raw_name or ""),
            has_hot_potato_books=int(hot_potato) if hot_potato is not None else 0,
        ),
        modifier=get_string(extra, "modifier"),
        runes=_numeric_mapping(get_compound(extra, "runes")),
        uuid=get_string(extra, "uuid"),
        enchantments=_numeric_mapping(get_compound(extra, "enchantments")),
    )


def _slots(raw: Any) -> Sequence[Optional[TagNode]]:
    if isinstance(raw, dict):
        # {"type": "list", "value": {...}} tree from JavaScript NBT tooling
        try:
            raw = TagNode.from_json(raw)
        except (TypeError, AttributeError, ValueError) as e:
            raise InventoryFormatError(f"Invalid NBT data: {e}") from e
    if isinstance(raw, TagNode):
        if raw.kind != "list" or not isinstance(raw.value, list):
            raise InventoryFormatError(f"Invalid NBT data: expected a list of items, got '{raw.kind}'")
        return raw.value
    if isinstance(raw, (list, tuple)):
        return raw
    raise InventoryFormatError(f"Invalid NBT data: expected a list of items, got {type(raw).__name__}")


def parse_inventory(raw: Any) -> InventoryResult:
    """
    Parse every slot of an inventory, keeping slot order.

    Accepts a list TagNode, a plain sequence of slots, or the JSON
    {"type": "list", ...} tree. Empty and malformed slots are dropped;
    only a payload that is not a list at all raises InventoryFormatError.
    """
    items: List[ParsedItem] = []
    skipped = 0

    for index, slot in enumerate(_slots(raw)):
        if not isinstance(slot, TagNode):
            skipped += 1
            continue
        try:
            item = parse_item(slot)
        except (TypeError, ValueError) as e:
            logger.debug("Skipping malformed slot %d: %s", index, e)
            item = None
        if item is None:
            skipped += 1
        else:
            items.append(item)

    logger.debug("Parsed %d items (%d empty or skipped slots)", len(items), skipped)
    return InventoryResult(items=items)
