"""
Bencode encoder, the inverse of the decoder. Dictionaries are written in
canonical (sorted key) order.
"""
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType


def encode(obj) -> bytes:
    """Encodes a Python object or BencodeType into bencoded bytes."""
    if isinstance(obj, BencodeType):
        obj = obj.value

    # bool is an int subclass but has no bencode form
    if isinstance(obj, bool):
        raise TypeError("Cannot bencode a boolean")

    if isinstance(obj, int):
        return encode_int(obj)

    if isinstance(obj, str):
        return encode_str(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return encode_bytes(bytes(obj))

    if isinstance(obj, list):
        return encode_list(obj)

    if isinstance(obj, dict):
        return encode_dict(obj)

    raise TypeError(f"Cannot bencode object of type {type(obj).__name__}")


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    return f"i{n}e".encode()


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return str(len(b)).encode() + b":" + b


def encode_str(s: str) -> bytes:
    """Encodes a string to bencoded bytes as UTF-8 (e.g., 4:spam)."""
    return encode_bytes(s.encode())


def encode_list(lst: list) -> bytes:
    """Encodes a list to bencoded bytes (e.g., l4:spame)."""
    return b"l" + b"".join(encode(x) for x in lst) + b"e"


def _key_to_bytes(k) -> bytes:
    if isinstance(k, BencodeString):
        return k.value
    if isinstance(k, str):
        return k.encode()
    if isinstance(k, bytes):
        return k
    raise TypeError(f"Dictionary keys must be bytes or str, not {type(k).__name__}")


def encode_dict(d: dict) -> bytes:
    """Encodes a dictionary to bencoded bytes (e.g., d3:cow3:moo4:spam4:eggse)."""
    items = {}
    for key, value in d.items():
        key_bytes = _key_to_bytes(key)
        if key_bytes in items:
            raise ValueError(f"Duplicate dictionary key {key_bytes!r}")
        items[key_bytes] = value

    parts = [b"d"]
    for key_bytes in sorted(items):
        parts.append(encode_bytes(key_bytes))
        parts.append(encode(items[key_bytes]))
    parts.append(b"e")
    return b"".join(parts)


def to_bencode(obj) -> BencodeType:
    """Wraps a native Python object in the matching BencodeType tree."""
    if isinstance(obj, BencodeType):
        return obj
    if isinstance(obj, bool):
        raise TypeError("Cannot bencode a boolean")
    if isinstance(obj, int):
        return BencodeInt(obj)
    if isinstance(obj, str):
        return BencodeString(obj.encode())
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BencodeString(obj)
    if isinstance(obj, list):
        return BencodeList([to_bencode(x) for x in obj])
    if isinstance(obj, dict):
        return BencodeDict({_key_to_bytes(k): to_bencode(v) for k, v in obj.items()})
    raise TypeError(f"Cannot bencode object of type {type(obj).__name__}")
