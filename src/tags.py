"""
Tag-tree model for decoded SkyBlock NBT data.

Every node is a TagNode(kind, value):
  - numeric kinds ("byte", "short", "int", "long", "float", "double") hold an int/float
  - "string" holds a str
  - "list" holds a list of TagNode
  - "compound" holds a dict of name -> TagNode
  - array kinds ("byteArray", "intArray", "longArray") hold a list of ints

The lookup helpers never raise on missing or wrong-shape data, they
return None instead. Callers treat every field as optional.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from nbtlib.tag import Array, Compound, List as NBTList, Numeric, String

Number = Union[int, float]

NUMERIC_KINDS = frozenset({"byte", "short", "int", "long", "float", "double"})

_NBT_KIND_NAMES = {
    "Byte": "byte",
    "Short": "short",
    "Int": "int",
    "Long": "long",
    "Float": "float",
    "Double": "double",
    "ByteArray": "byteArray",
    "IntArray": "intArray",
    "LongArray": "longArray",
}


@dataclass(frozen=True)
class TagNode:
    kind: str
    value: Any

    @classmethod
    def from_nbt(cls, tag: Any) -> "TagNode":
        """Convert an nbtlib tag (as returned by the decoder) into a TagNode tree."""
        if isinstance(tag, Compound):
            return cls("compound", {str(k): cls.from_nbt(v) for k, v in tag.items()})
        if isinstance(tag, NBTList):
            return cls("list", [cls.from_nbt(v) for v in tag])
        if isinstance(tag, Array):
            return cls(_NBT_KIND_NAMES.get(type(tag).__name__, "intArray"), [int(v) for v in tag])
        if isinstance(tag, String):
            return cls("string", str(tag))
        if isinstance(tag, Numeric):
            kind = _NBT_KIND_NAMES.get(type(tag).__name__, "int")
            return cls(kind, float(tag) if kind in ("float", "double") else int(tag))
        raise TypeError(f"Unsupported NBT tag: {type(tag).__name__}")

    @classmethod
    def from_json(cls, obj: Any) -> "TagNode":
        """
        Build a TagNode tree from the {"type": ..., "value": ...} JSON shape
        used by JavaScript NBT tooling. List values are themselves
        {"type": <element type>, "value": [...]} with unwrapped elements.
        """
        if not isinstance(obj, dict) or "type" not in obj:
            raise TypeError("Expected a {'type', 'value'} mapping")
        kind = obj["type"]
        value = obj.get("value")

        if kind == "compound":
            return cls("compound", {k: cls.from_json(v) for k, v in (value or {}).items()})
        if kind == "list":
            value = value or {}
            elem_type = value.get("type", "end")
            return cls("list", [cls._wrap(elem_type, v) for v in value.get("value", [])])
        return cls._wrap(kind, value)

    @classmethod
    def _wrap(cls, kind: str, value: Any) -> "TagNode":
        if kind == "compound":
            return cls("compound", {k: cls.from_json(v) for k, v in value.items()})
        if kind == "list":
            return cls.from_json({"type": "list", "value": value})
        if kind == "long" and isinstance(value, list) and len(value) == 2:
            # [high, low] 32-bit halves
            high, low = value
            return cls("long", (int(high) << 32) | (int(low) & 0xFFFFFFFF))
        return cls(kind, value)

    def get(self, path: str) -> Optional["TagNode"]:
        return lookup(self, path)


# -----------------------------
# SAFE NAVIGATION
# -----------------------------

def lookup(node: Optional[TagNode], path: str) -> Optional[TagNode]:
    """Follow a dotted path through compounds (numeric parts index lists)."""
    current = node
    for part in path.split(".") if path else []:
        if current is None:
            return None
        if current.kind == "compound" and isinstance(current.value, dict):
            current = current.value.get(part)
        elif current.kind == "list" and isinstance(current.value, list) and part.isdigit():
            index = int(part)
            current = current.value[index] if index < len(current.value) else None
        else:
            return None
    return current if isinstance(current, TagNode) else None


def get_string(node: Optional[TagNode], path: str = "") -> Optional[str]:
    leaf = lookup(node, path)
    if leaf is None or leaf.kind != "string" or not isinstance(leaf.value, str):
        return None
    return leaf.value


def get_number(node: Optional[TagNode], path: str = "") -> Optional[Number]:
    leaf = lookup(node, path)
    if leaf is None or leaf.kind not in NUMERIC_KINDS:
        return None
    value = leaf.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def get_list(node: Optional[TagNode], path: str = "") -> Optional[List[TagNode]]:
    leaf = lookup(node, path)
    if leaf is None or leaf.kind != "list" or not isinstance(leaf.value, list):
        return None
    return leaf.value


def get_string_list(node: Optional[TagNode], path: str = "") -> Optional[List[str]]:
    items = get_list(node, path)
    if items is None:
        return None
    strings = [item.value for item in items if item.kind == "string" and isinstance(item.value, str)]
    if len(strings) != len(items):
        return None
    return strings


def get_compound(node: Optional[TagNode], path: str = "") -> Optional[Dict[str, TagNode]]:
    leaf = lookup(node, path)
    if leaf is None or leaf.kind != "compound" or not isinstance(leaf.value, dict):
        return None
    return leaf.value
