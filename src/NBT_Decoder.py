import base64
import binascii
import io
import zlib

import nbtlib
from nbtlib.tag import Compound

from tags import TagNode


class NBTDecodeError(RuntimeError):
    pass


class ItemDecoder:
    @staticmethod
    def _parse_root(data_b64: str) -> Compound:
        # Base64 → bytes
        try:
            compressed = base64.b64decode(data_b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise NBTDecodeError("Inventory data is not valid base64") from e

        # GZIP decompress
        try:
            decompressed = zlib.decompress(compressed, 16 + zlib.MAX_WBITS)
        except zlib.error as e:
            raise NBTDecodeError("Inventory data is not gzip compressed") from e

        # Parse binary NBT
        buf = io.BytesIO(decompressed)
        try:
            return nbtlib.File.parse(buf)
        except Exception:
            buf.seek(0)
            try:
                root = Compound.parse(buf)
                return root.get("", root)
            except Exception as e:
                raise NBTDecodeError("Could not parse NBT") from e

    @staticmethod
    def decode(data_b64: str) -> TagNode:
        """
        Decode a Hypixel base64 NBT blob (Base64 + GZIP + NBT) into a TagNode tree.
        The root compound usually holds a single "i" list of item slots.
        """
        return TagNode.from_nbt(ItemDecoder._parse_root(data_b64))

    @staticmethod
    def decode_inventory(data_b64: str) -> TagNode:
        """Decode an inventory blob and return its list of item slots."""
        root = ItemDecoder.decode(data_b64)
        slots = root.get("i")
        if slots is None or slots.kind != "list":
            raise NBTDecodeError("Decoded NBT has no item list")
        return slots


if __name__ == "__main__":
    item_bytes_b64 = "H4sIAAAAAAAA/01RzU7bQBCehFASS9DSA/RULRIHUJRiwPmBGw1OghQQUiIuCKGNPXZXrNfRehfRN+gLVEJ9gfQCZ855FB4EMQ4IuH37/cw3q3EAKlAQDgAUilAUIdwXYL6dWmUKDswZHs9BpSdC7EgeZ+R6cmAhFNlY8t8VKPVTjWViF+HrdNI8xAhVhvtsOuHVpgsrxA21RfZBiKp1WCX+WCihYjYYI4Y536huu/DtXeik2liFL1IdvpDy5o1y73cCrXOiHx/+Erp4fbYeb2/zJy21QdGOlZIN0LCfqbLZPvNvxqgNoxLUlGhuuFveJtQIdTVXJpvV7dBI9nHB3Em5V2625uBK0GSJ1yiZVTINrjD8QaW5lfqHv0TGhMGEBVyxETKNUapjDNdgeTqpTyfSPz1qs57fP/aHZSid8ARnSlfygHKshzJBAw589m+M5gfGaDGyBrPy7EpL3f5B+2joX75NsJbo9agVBPVgd7fmNoJRzQsJ7UXIa5EXeN5eY9sdNcMSVIxIMDM8GdPZ//3/c3YHUIRPhzzhMdIn4BnIpiTBFwIAAA=="

    from item_parser import parse_inventory
    from pprint import pprint

    pprint(parse_inventory(ItemDecoder.decode_inventory(item_bytes_b64)).to_dict())
