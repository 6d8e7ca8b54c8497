"""
Bencode decoder for BitTorrent metainfo and tracker responses.
"""
import logging

from .structure import INT64_MAX, INT64_MIN, BencodeDict, BencodeInt, BencodeList, BencodeString

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 512

_DIGITS = b"0123456789"
_MAX_INT_DIGITS = len(str(INT64_MAX))


class BencodeDecodeError(ValueError):
    """Base exception for Bencode decoding errors."""
    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at index {offset}")
        self.offset = offset


class MalformedInteger(BencodeDecodeError):
    pass


class IntegerOverflow(BencodeDecodeError):
    pass


class MalformedLength(BencodeDecodeError):
    pass


class TruncatedInput(BencodeDecodeError):
    pass


class UnterminatedContainer(BencodeDecodeError):
    pass


class NoMatchingVariant(BencodeDecodeError):
    pass


class NestingTooDeep(BencodeDecodeError):
    pass


class DuplicateKey(BencodeDecodeError):
    def __init__(self, key: bytes, offset: int):
        super().__init__(f"Duplicate dictionary key {key!r}", offset)
        self.key = key


class TrailingData(BencodeDecodeError):
    pass


class _Frame:
    """An open list or dictionary on the decoder stack."""
    __slots__ = ("container", "offset", "key", "key_offset")

    def __init__(self, container, offset: int):
        self.container = container
        self.offset = offset  # position of the opening 'l' / 'd'
        self.key = None
        self.key_offset = None

    @property
    def is_dict(self) -> bool:
        return isinstance(self.container, BencodeDict)


class BencodeDecoder:
    """
    Decodes Bencoded byte strings into BencodeType trees.

    Nesting is tracked on an explicit stack, so deeply nested input fails with
    NestingTooDeep instead of exhausting the interpreter stack.
    """
    def __init__(self, data: bytes, max_depth: int = DEFAULT_MAX_DEPTH,
                 allow_duplicate_keys: bool = True):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Cannot decode object of type {type(data).__name__}, bytes required")
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.data = bytes(data)
        self.i = 0  # cursor index
        self.max_depth = max_depth
        self.allow_duplicate_keys = allow_duplicate_keys

    def decode(self):
        """Decodes exactly one value; bytes left over are an error."""
        result = self._parse_value()
        if self.i != len(self.data):
            raise TrailingData(f"{len(self.data) - self.i} trailing bytes after value", self.i)
        return result

    def decode_prefix(self):
        """Decodes one value from the start of the data and returns (value, remainder)."""
        result = self._parse_value()
        return result, self.data[self.i:]

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _at_end(self) -> bool:
        return self.i >= len(self.data)

    def _peek(self):
        if self._at_end():
            raise TruncatedInput("Unexpected end of input", self.i)
        return self.data[self.i:self.i+1]

    def _consume(self, n=1):
        """Moves cursor forward by n bytes and returns the consumed chunk."""
        chunk = self.data[self.i:self.i+n]
        self.i += n
        return chunk

    def _digits(self) -> bytes:
        """Consumes a (possibly empty) run of ASCII digits."""
        start = self.i
        while self.i < len(self.data) and self.data[self.i] in _DIGITS:
            self.i += 1
        return self.data[start:self.i]

    # --------------------------
    # Grammar primitives
    # --------------------------

    def _parse_int(self):
        """Parses i<digits>e, rejecting leading zeros and negative zero."""
        start = self.i
        self._consume(1)  # skip 'i'

        negative = self.data[self.i:self.i+1] == b"-"
        if negative:
            self._consume(1)

        digits = self._digits()
        if not digits:
            raise MalformedInteger("Integer has no digits", start)
        if digits[:1] == b"0" and (len(digits) > 1 or negative):
            raise MalformedInteger("Integer has a leading zero", start)
        if self.data[self.i:self.i+1] != b"e":
            raise MalformedInteger("Integer is not terminated by 'e'", self.i)
        self._consume(1)  # skip 'e'

        if len(digits) > _MAX_INT_DIGITS:
            raise IntegerOverflow("Integer does not fit in 64 bits", start)
        num = -int(digits) if negative else int(digits)
        if not INT64_MIN <= num <= INT64_MAX:
            raise IntegerOverflow("Integer does not fit in 64 bits", start)
        return BencodeInt(num)

    def _parse_length(self) -> int:
        """Parses the <digits>: prefix of a byte string."""
        start = self.i
        digits = self._digits()
        if not digits:
            raise MalformedLength("Byte string length has no digits", start)
        if self.data[self.i:self.i+1] != b":":
            raise MalformedLength("Byte string length is not terminated by ':'", self.i)
        self._consume(1)  # skip ':'
        significant = digits.lstrip(b"0")
        if len(significant) > _MAX_INT_DIGITS:
            raise TruncatedInput("Byte string length exceeds the input", start)
        return int(significant or b"0")

    def _parse_string(self):
        """Parses a byte string from the Bencoded data."""
        start = self.i
        length = self._parse_length()
        remaining = len(self.data) - self.i
        if length > remaining:
            raise TruncatedInput(
                f"Byte string declares {length} bytes but only {remaining} remain", start)
        return BencodeString(self._consume(length))

    # --------------------------
    # Value parser
    # --------------------------

    def _open(self, stack, container):
        if len(stack) >= self.max_depth:
            raise NestingTooDeep(f"Nesting exceeds {self.max_depth} levels", self.i)
        stack.append(_Frame(container, self.i))
        self._consume(1)  # skip 'l' / 'd'

    def _parse_value(self):
        stack = []

        while True:
            value = None

            if stack:
                frame = stack[-1]
                if self._at_end():
                    raise UnterminatedContainer("Container is never closed", frame.offset)

                if frame.key is None and self._peek() == b"e":
                    self._consume(1)  # skip 'e'
                    value = stack.pop().container
                elif frame.is_dict and frame.key is None:
                    # keys MUST be strings
                    frame.key_offset = self.i
                    frame.key = self._parse_string().value
                    continue

            if value is None:
                ch = self._peek()

                if ch == b"i":
                    value = self._parse_int()
                elif ch.isdigit():  # Bencode strings start with length, which is a digit
                    value = self._parse_string()
                elif ch == b"l":
                    self._open(stack, BencodeList([]))
                    continue
                elif ch == b"d":
                    self._open(stack, BencodeDict({}))
                    continue
                else:
                    raise NoMatchingVariant(f"Invalid token {ch!r}", self.i)

            if not stack:
                return value

            parent = stack[-1]
            if parent.is_dict:
                self._insert(parent, value)
            else:
                parent.container.value.append(value)

    def _insert(self, frame, value):
        items = frame.container.value
        if frame.key in items:
            if not self.allow_duplicate_keys:
                raise DuplicateKey(frame.key, frame.key_offset)
            logger.debug("Duplicate key %r at index %d, keeping last value", frame.key, frame.key_offset)
        items[frame.key] = value
        frame.key = None
        frame.key_offset = None


def decode(data: bytes, **options):
    """
    Convenience function to decode Bencoded data holding exactly one value.
    """
    return BencodeDecoder(data, **options).decode()


def decode_prefix(data: bytes, **options):
    """
    Decodes one value from the start of data, returning (value, remainder).
    """
    return BencodeDecoder(data, **options).decode_prefix()
