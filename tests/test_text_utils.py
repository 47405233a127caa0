import pytest

from text_utils import clean, extract_number


def test_clean_strips_color_and_style_codes():
    assert clean("§6§lLEGENDARY §r§7Sword") == "LEGENDARY Sword"
    assert clean("§0§1§2§3§4§5§6§7§8§9§a§b§c§d§e§f§k§l§m§n§o§rx") == "x"


def test_clean_leaves_unknown_codes():
    assert clean("§zText §X") == "§zText §X"
    assert clean("plain text") == "plain text"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Mana Cost: 100", 100),
        ("Soulflow Cost: 1,200", 1200),
        ("+1,234,567 coins", 1234567),
        ("-15 Defense", -15),
        ("Crit Chance: +2.5%", 2.5),
        ("no digits here", 0),
        ("", 0),
    ],
)
def test_extract_number(text, expected):
    assert extract_number(text) == expected


def test_extract_number_types():
    assert isinstance(extract_number("Mana Cost: 50"), int)
    assert isinstance(extract_number("0.5s"), float)
