import hashlib

import pytest

from bdecode import InvalidText, NestingTooDeep, TrailingData, WrongVariant, decode, encode
from torrent.metainfo import MetainfoError, TorrentMeta, extract_info_bytes

PIECES = bytes(range(40))


def make_torrent(**overrides):
    info = {
        "name": "sample.txt",
        "piece length": 16384,
        "length": 20000,
        "pieces": PIECES,
    }
    info.update(overrides.pop("info", {}))
    root = {
        "announce": "http://tracker.example.com/announce",
        "comment": "sample torrent",
        "info": info,
    }
    root.update(overrides)
    return root


def test_metainfo_load(tmp_path):
    path = tmp_path / "sample.torrent"
    path.write_bytes(encode(make_torrent()))
    print("Loading torrent:", path)

    meta = TorrentMeta(path)
    print("Parsed TorrentMeta:", meta)

    assert meta.comment == "sample torrent"
    assert meta.announce == "http://tracker.example.com/announce"
    assert meta.announce_list is None
    assert meta.name == "sample.txt"
    assert meta.piece_length == 16384
    assert meta.length == 20000
    assert meta.pieces == PIECES
    assert meta.num_pieces == 2

    info_bytes = encode(make_torrent()["info"])
    print("Info hash:", meta.info_hash.hex())
    assert meta.info_hash == hashlib.sha1(info_bytes).digest()


def test_announce_list_keeps_empty_tiers():
    raw = encode(make_torrent(**{"announce-list": [["http://a/announce", "udp://b:80"], []]}))
    meta = TorrentMeta.from_bytes(raw)
    assert meta.announce_list == [["http://a/announce", "udp://b:80"], []]


def test_missing_key():
    torrent = make_torrent()
    del torrent["info"]["length"]
    with pytest.raises(MetainfoError, match="length"):
        TorrentMeta.from_bytes(encode(torrent))

    torrent = make_torrent()
    del torrent["comment"]
    with pytest.raises(MetainfoError, match="comment"):
        TorrentMeta.from_bytes(encode(torrent))


def test_wrong_shapes():
    with pytest.raises(WrongVariant):
        TorrentMeta.from_bytes(encode(make_torrent(info={"length": "20000"})))

    torrent = make_torrent()
    torrent["info"] = [1, 2]
    with pytest.raises(WrongVariant):
        TorrentMeta.from_bytes(encode(torrent))

    with pytest.raises(WrongVariant):
        TorrentMeta.from_bytes(b"l4:spame")

    with pytest.raises(InvalidText):
        TorrentMeta.from_bytes(encode(make_torrent(info={"name": b"\xff\xfe"})))


def test_binary_pieces_are_not_text():
    meta = TorrentMeta.from_bytes(encode(make_torrent(info={"pieces": b"\xff" * 20})))
    assert meta.pieces == b"\xff" * 20
    assert meta.num_pieces == 1


def test_decode_errors_propagate():
    with pytest.raises(TrailingData):
        TorrentMeta.from_bytes(encode(make_torrent()) + b"junk")

    with pytest.raises(NestingTooDeep):
        TorrentMeta.from_bytes(encode(make_torrent(comment=[[["deep"]]])), max_depth=3)


def test_info_hash_uses_bytes_from_file():
    # info keys out of canonical order and a zero-padded length prefix
    info = b"d4:name1:x6:lengthi1e12:piece lengthi16384e6:pieces020:" + PIECES[:20] + b"e"
    raw = b"d8:announce8:http://a7:comment1:c4:info" + info + b"e"

    meta = TorrentMeta.from_bytes(raw)
    print("Info hash:", meta.info_hash.hex())

    assert meta.info_bytes == info
    assert meta.info_hash == hashlib.sha1(info).digest()
    assert meta.info_hash != hashlib.sha1(encode(meta.info)).digest()


def test_extract_info_bytes_with_trailing_keys():
    info = b"d6:lengthi5e4:name1:y12:piece lengthi1e6:pieces0:e"
    raw = b"d4:info" + info + b"5:zzzzzli1eee"
    assert extract_info_bytes(raw) == info


def test_extract_info_bytes_last_duplicate_wins():
    first = b"d4:name1:ae"
    second = b"d4:name1:be"
    raw = b"d4:info" + first + b"4:info" + second + b"e"
    assert extract_info_bytes(raw) == second
    assert decode(raw).as_dict()[b"info"] == decode(second)
