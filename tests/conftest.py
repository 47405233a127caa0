from typing import Dict, Optional, Sequence

import pytest

from tags import TagNode

ASPECT_LORE = (
    "§7Damage: §c+100",
    "§7Strength: §c+100",
    "",
    "§6Ability: Instant Transmission §e§lRIGHT CLICK",
    "§7Teleport §a8 blocks §7ahead of",
    "§7you and gain §a+50 §f✦Speed",
    "§8Mana Cost: §3§350",
    "",
    "§9§lRARE SWORD",
)


def _string(value: str) -> TagNode:
    return TagNode("string", value)


def build_item(
    item_id: Optional[str] = "ASPECT_OF_THE_END",
    name: Optional[str] = "§9Aspect of the End",
    lore: Optional[Sequence[str]] = ASPECT_LORE,
    count: Optional[int] = 1,
    extra: Optional[Dict[str, TagNode]] = None,
    unbreakable: Optional[int] = None,
    with_display: bool = True,
) -> TagNode:
    """Assemble an inventory slot the way the NBT decoder lays it out."""
    attributes: Dict[str, TagNode] = {}
    if item_id is not None:
        attributes["id"] = _string(item_id)
    attributes.update(extra or {})

    tag: Dict[str, TagNode] = {"ExtraAttributes": TagNode("compound", attributes)}
    if with_display:
        display: Dict[str, TagNode] = {}
        if name is not None:
            display["Name"] = _string(name)
        if lore is not None:
            display["Lore"] = TagNode("list", [_string(line) for line in lore])
        tag["display"] = TagNode("compound", display)
    if unbreakable is not None:
        tag["Unbreakable"] = TagNode("byte", unbreakable)

    slot: Dict[str, TagNode] = {
        "id": TagNode("string", "minecraft:diamond_sword"),
        "tag": TagNode("compound", tag),
    }
    if count is not None:
        slot["Count"] = TagNode("byte", count)
    return TagNode("compound", slot)


@pytest.fixture
def make_item():
    return build_item


@pytest.fixture
def aspect_of_the_end():
    return build_item()
