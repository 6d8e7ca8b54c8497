"""
Data structures for representing Bencoded values, with typed accessors.
"""
from abc import ABC, abstractmethod
from enum import Enum

__all__ = [
    "BencodeKind",
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "BencodeAccessError",
    "WrongVariant",
    "InvalidText",
]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class BencodeKind(Enum):
    INTEGER = "Integer"
    BYTE_STRING = "ByteString"
    LIST = "List"
    DICT = "Dict"


class BencodeAccessError(ValueError):
    """Base class for failures of the typed accessors."""
    pass


class WrongVariant(BencodeAccessError):
    """A value was read as a kind it is not."""
    def __init__(self, expected: BencodeKind, actual: BencodeKind):
        super().__init__(f"Expected {expected.value}, got {actual.value}")
        self.expected = expected
        self.actual = actual


class InvalidText(BencodeAccessError):
    """A byte string was read as text but does not decode."""
    def __init__(self, value: bytes, encoding: str, reason: str):
        super().__init__(f"Byte string of length {len(value)} is not valid {encoding}: {reason}")
        self.value = value
        self.encoding = encoding


class BencodeType(ABC):
    """Base class for all Bencode data types."""
    value = None

    @property
    @abstractmethod
    def kind(self) -> BencodeKind:
        """The variant tag; each subclass sets it as a class attribute."""

    # --------------------------
    # Typed accessors
    # --------------------------

    def as_int(self) -> int:
        raise WrongVariant(BencodeKind.INTEGER, self.kind)

    def as_bytes(self) -> bytes:
        raise WrongVariant(BencodeKind.BYTE_STRING, self.kind)

    def as_list(self) -> list:
        raise WrongVariant(BencodeKind.LIST, self.kind)

    def as_dict(self) -> dict:
        raise WrongVariant(BencodeKind.DICT, self.kind)

    def as_text(self, encoding: str = "utf-8") -> str:
        """Narrows a byte string to text, failing on undecodable bytes."""
        raw = self.as_bytes()
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError as exc:
            raise InvalidText(raw, encoding, exc.reason) from exc

    def __eq__(self, other):
        if not isinstance(other, BencodeType):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    kind = BencodeKind.INTEGER

    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError("BencodeInt must fit in a signed 64-bit integer.")
        self.value = value

    def as_int(self) -> int:
        return self.value

    def __hash__(self):
        return hash((self.kind, self.value))

    def __repr__(self):
        return f"BencodeInt({self.value})"


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    kind = BencodeKind.BYTE_STRING

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        self.value = bytes(value)

    def as_bytes(self) -> bytes:
        return self.value

    def __len__(self):
        return len(self.value)

    def __hash__(self):
        return hash((self.kind, self.value))

    def __repr__(self):
        return f"BencodeString({self.value!r})"


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    kind = BencodeKind.LIST
    __hash__ = None

    def __init__(self, value: list):
        if not isinstance(value, list):
            raise TypeError("BencodeList requires a list.")
        self.value = value

    def as_list(self) -> list:
        return self.value

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __repr__(self):
        return f"BencodeList({self.value!r})"


class BencodeDict(BencodeType):
    """Represents a Bencoded dictionary."""
    kind = BencodeKind.DICT
    __hash__ = None

    def __init__(self, value: dict):
        if not isinstance(value, dict):
            raise TypeError("BencodeDict requires a dict.")
        # keys must be bytes (bencode requirement)
        for k in value.keys():
            if not isinstance(k, bytes):
                raise TypeError("BencodeDict keys must be bytes.")
        self.value = value

    def as_dict(self) -> dict:
        return self.value

    def get(self, key: bytes, default=None):
        return self.value.get(key, default)

    def __contains__(self, key):
        return key in self.value

    def __len__(self):
        return len(self.value)

    def __repr__(self):
        return f"BencodeDict({self.value!r})"
