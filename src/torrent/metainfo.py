import hashlib
import logging
from pathlib import Path
from typing import List, Optional

from bdecode import DEFAULT_MAX_DEPTH, BencodeDict, decode, decode_prefix

logger = logging.getLogger(__name__)

PIECE_HASH_LEN = 20


class MetainfoError(ValueError):
    """Raised when a decoded torrent lacks a required field."""
    pass


def _require(d: BencodeDict, key: bytes, where: str):
    value = d.get(key)
    if value is None:
        raise MetainfoError(f"Torrent missing '{key.decode()}' in {where}")
    return value


def extract_info_bytes(raw: bytes, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """
    Returns the exact bencoded 'info' value as it appears in raw, so the
    info hash matches the file even when it is not in canonical form.
    raw must already be known to decode to a dict holding 'info'.
    """
    value_depth = max(max_depth - 1, 1)
    info_bytes = None

    rest = bytes(raw[1:])  # skip 'd'
    while rest[:1] != b"e":
        key, rest = decode_prefix(rest, max_depth=1)
        start = len(raw) - len(rest)
        _, rest = decode_prefix(rest, max_depth=value_depth)
        # duplicate keys: the last one wins, as in the decoder
        if key.value == b"info":
            info_bytes = bytes(raw[start:len(raw) - len(rest)])

    if info_bytes is None:
        raise MetainfoError("Torrent missing 'info' in torrent")
    return info_bytes


class TorrentMeta:
    """
    Metadata of a single-file torrent, read through the typed accessors.

    Wrong-shaped fields raise WrongVariant / InvalidText from bdecode,
    missing ones raise MetainfoError.
    """
    def __init__(self, path: Path, max_depth: int = DEFAULT_MAX_DEPTH):
        self.path = Path(path)
        raw = self.path.read_bytes()
        logger.debug("Read %d bytes from %s", len(raw), self.path)
        self._load(raw, max_depth)

    @classmethod
    def from_bytes(cls, raw: bytes, source: str = "<bytes>", max_depth: int = DEFAULT_MAX_DEPTH):
        meta = cls.__new__(cls)
        meta.path = Path(source)
        meta._load(raw, max_depth)
        return meta

    def _load(self, raw: bytes, max_depth: int):
        root = decode(raw, max_depth=max_depth)
        # a non-dict root raises WrongVariant here
        root.as_dict()
        self.data = root

        # ------------------ TOP LEVEL ------------------
        self.comment = _require(self.data, b"comment", "torrent").as_text()
        self.announce = _require(self.data, b"announce", "torrent").as_text()
        self.announce_list = self._read_announce_list()

        # ------------------ INFO ------------------
        info_b = _require(self.data, b"info", "torrent")
        info_b.as_dict()
        self.info = info_b
        self.info_bytes = extract_info_bytes(raw, max_depth)
        self.info_hash = hashlib.sha1(self.info_bytes).digest()

        self.name = _require(self.info, b"name", "info").as_text()
        self.piece_length = _require(self.info, b"piece length", "info").as_int()
        self.length = _require(self.info, b"length", "info").as_int()
        self.pieces = _require(self.info, b"pieces", "info").as_bytes()

        if len(self.pieces) % PIECE_HASH_LEN:
            logger.warning("%s: pieces length %d is not a multiple of %d",
                           self.path, len(self.pieces), PIECE_HASH_LEN)
        self.num_pieces = len(self.pieces) // PIECE_HASH_LEN

        logger.debug("Loaded %r", self)

    def _read_announce_list(self) -> Optional[List[List[str]]]:
        ann_list_b = self.data.get(b"announce-list")
        if ann_list_b is None:
            return None
        # empty tiers are legal and kept as-is
        return [[url.as_text() for url in tier.as_list()] for tier in ann_list_b.as_list()]

    def __repr__(self):
        return (
            f"TorrentMeta(name={self.name!r}, length={self.length}, pieces={self.num_pieces}, "
            f"announce={self.announce!r})"
        )
