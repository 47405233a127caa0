import re
from typing import Union

# "§" followed by a color (0-9, a-f) or style (k-o, r) code
FORMAT_CODE_RE = re.compile(r"§[0-9a-fklmnor]")
NUMBER_RE = re.compile(r"[+-]?\d[\d,]*(?:\.\d+)?")


def clean(text: str) -> str:
    """Strip Minecraft formatting codes from a display string."""
    return FORMAT_CODE_RE.sub("", text)


def to_number(token: str) -> Union[int, float]:
    token = token.replace(",", "")
    return float(token) if "." in token else int(token)


def extract_number(text: str) -> Union[int, float]:
    """
    Return the first signed number in `text`, ignoring thousands separators.
    "Mana Cost: 1,200" -> 1200, "-2.5 seconds" -> -2.5, "none" -> 0
    """
    match = NUMBER_RE.search(text)
    if not match:
        return 0
    return to_number(match.group(0))
