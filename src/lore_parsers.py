"""
Heuristic parsers for SkyBlock item lore.

Lore is a list of color-coded display lines with no formal grammar, so each
parser works off an ordered table of literal markers. Tables are evaluated
top to bottom and the first match wins.
"""

import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from models import ItemAbility, ItemCharges, ItemStat, ItemType, Rarity
from text_utils import clean, extract_number, to_number

# -----------------------------
# STATS
# -----------------------------

STAT_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("damage", "Damage: "),
    ("strength", "Strength: "),
    ("critChance", "Crit Chance: "),
    ("critDamage", "Crit Damage: "),
    ("intelligence", "Intelligence: "),
    ("health", "Health: "),
    ("defense", "Defense: "),
    ("speed", "Speed: "),
    ("attackSpeed", "Bonus Attack Speed: "),
    ("seaCreatureChance", "Sea Creature Chance: "),
    ("miningSpeed", "Mining Speed: "),
    ("ferocity", "Ferocity: "),
    ("fishingSpeed", "Fishing Speed: "),
)

_AMOUNT = r"[\d,]+(?:\.\d+)?"
STAT_VALUE_RE = re.compile(rf"^\+?(-?{_AMOUNT})%?(?:\s*\(\+({_AMOUNT})%?\))?")
# Dungeon bonus is rendered dark gray: "§8(+30)"
DUNGEON_BONUS_RE = re.compile(rf"§8\(\+({_AMOUNT})%?\)")
GEAR_SCORE_RE = re.compile(rf"Gear Score: ({_AMOUNT})(?:\s*\(\+?({_AMOUNT})\))?")


def _parse_stat_line(raw_line: str, value_text: str) -> Optional[ItemStat]:
    match = STAT_VALUE_RE.match(value_text.strip())
    if not match:
        return None

    marked = DUNGEON_BONUS_RE.search(raw_line)
    if marked:
        dungeon = marked.group(1)
    elif clean(raw_line) != raw_line:
        # colored line without the dungeon marker; other parentheticals are reforge bonuses
        dungeon = None
    else:
        dungeon = match.group(2)

    return ItemStat(
        regular=to_number(match.group(1)),
        dungeon=to_number(dungeon) if dungeon else None,
    )


def parse_stats(lines: Sequence[str]) -> Optional[Dict[str, ItemStat]]:
    """
    Collect the item's stat lines into {statKey: ItemStat}.

    Returns None rather than an empty dict when no stat line is present.
    """
    cleaned = [clean(line) for line in lines]
    stats: Dict[str, ItemStat] = {}

    for key, prefix in STAT_PREFIXES:
        for raw_line, line in zip(lines, cleaned):
            if line.startswith(prefix):
                stat = _parse_stat_line(raw_line, line[len(prefix):])
                if stat is not None:
                    stats[key] = stat
                break

    for line in cleaned:
        if "Gear Score:" in line:
            match = GEAR_SCORE_RE.search(line)
            if match:
                stats["gearScore"] = ItemStat(
                    regular=to_number(match.group(1)),
                    dungeon=to_number(match.group(2)) if match.group(2) else None,
                )
            break

    return stats or None


# -----------------------------
# ABILITY
# -----------------------------

ABILITY_MARKER = "Ability: "
ABILITY_TRIGGER_RE = re.compile(r"(?:RIGHT|LEFT) CLICK|HOLD")
CHARGE_NUMBERS_RE = re.compile(r"\d+")


def _charges(line: str) -> Optional[ItemCharges]:
    numbers = [int(n) for n in CHARGE_NUMBERS_RE.findall(line)]
    if len(numbers) < 2:
        return None
    current, maximum = numbers[:2]
    return ItemCharges(current=current, maximum=maximum, recharge_time=f"{maximum}s")


def _after(marker: str) -> Callable[[str], str]:
    def extract(line: str) -> str:
        return line.partition(marker)[2].lstrip()
    return extract


# (marker, ability field, value extractor)
ABILITY_LINE_FIELDS: Tuple[Tuple[str, str, Callable[[str], object]], ...] = (
    ("Mana Cost:", "mana_cost", extract_number),
    ("Cooldown:", "cooldown", _after("Cooldown:")),
    ("Soulflow Cost:", "soulflow_cost", extract_number),
    ("Charges:", "charges", _charges),
)


def parse_ability(lines: Sequence[str]) -> Optional[ItemAbility]:
    cleaned = [clean(line) for line in lines]
    start = next((i for i, line in enumerate(cleaned) if ABILITY_MARKER in line), None)
    if start is None:
        return None

    name = cleaned[start].split(ABILITY_MARKER, 1)[1]
    name = ABILITY_TRIGGER_RE.sub("", name).strip()

    fields: Dict[str, object] = {}
    description: List[str] = []

    for line in cleaned[start + 1:]:
        for marker, field, extract in ABILITY_LINE_FIELDS:
            if marker in line:
                fields[field] = extract(line)
                break
        else:
            if not line.strip() or line.startswith("§"):
                break
            description.append(line)

    return ItemAbility(
        name=name,
        description=" ".join(description),
        **{k: v for k, v in fields.items() if v is not None},
    )


# -----------------------------
# CLASSIFIERS
# -----------------------------

RARITY_ORDER: Tuple[Tuple[str, Rarity], ...] = (
    ("MYTHIC", Rarity.MYTHIC),
    ("LEGENDARY", Rarity.LEGENDARY),
    ("EPIC", Rarity.EPIC),
    ("RARE", Rarity.RARE),
    ("UNCOMMON", Rarity.UNCOMMON),
    ("SPECIAL", Rarity.SPECIAL),
)

ARMOR_ID_RE = re.compile(r"HELMET|CHESTPLATE|LEGGINGS|BOOTS")

# (predicate(item_id, lore_lines), type); identifier checks come before lore checks
TYPE_RULES: Tuple[Tuple[Callable[[str, Sequence[str]], bool], ItemType], ...] = (
    (lambda item_id, lines: "SWORD" in item_id, ItemType.SWORD),
    (lambda item_id, lines: "BOW" in item_id, ItemType.BOW),
    (lambda item_id, lines: bool(ARMOR_ID_RE.search(item_id)), ItemType.ARMOR),
    (lambda item_id, lines: any("ACCESSORY" in line for line in lines), ItemType.ACCESSORY),
    (lambda item_id, lines: "POTION" in item_id or "SCROLL" in item_id, ItemType.CONSUMABLE),
)


def parse_rarity(lines: Sequence[str]) -> Rarity:
    """The rarity tier is printed on the last lore line ("§6§lLEGENDARY SWORD")."""
    last_line = lines[-1] if lines else ""
    for marker, rarity in RARITY_ORDER:
        if marker in last_line:
            return rarity
    return Rarity.COMMON


def parse_type(item_id: str, lines: Sequence[str]) -> ItemType:
    for predicate, item_type in TYPE_RULES:
        if predicate(item_id, lines):
            return item_type
    return ItemType.MISC
