"""
Bencode decoding with typed accessors, plus the matching encoder.
"""
from .decoder import (
    DEFAULT_MAX_DEPTH,
    BencodeDecodeError,
    BencodeDecoder,
    DuplicateKey,
    IntegerOverflow,
    MalformedInteger,
    MalformedLength,
    NestingTooDeep,
    NoMatchingVariant,
    TrailingData,
    TruncatedInput,
    UnterminatedContainer,
    decode,
    decode_prefix,
)
from .encoder import encode, to_bencode
from .structure import (
    BencodeAccessError,
    BencodeDict,
    BencodeInt,
    BencodeKind,
    BencodeList,
    BencodeString,
    BencodeType,
    InvalidText,
    WrongVariant,
)

__all__ = [
    'decode', 'decode_prefix', 'encode', 'to_bencode', 'BencodeDecoder', 'DEFAULT_MAX_DEPTH',
    'BencodeKind', 'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'BencodeDecodeError', 'MalformedInteger', 'IntegerOverflow', 'MalformedLength',
    'TruncatedInput', 'UnterminatedContainer', 'NoMatchingVariant', 'NestingTooDeep',
    'DuplicateKey', 'TrailingData',
    'BencodeAccessError', 'WrongVariant', 'InvalidText',
]
