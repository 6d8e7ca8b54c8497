"""
Command-line tool that prints the metadata fields of a .torrent file.
"""
import argparse
import logging
import sys

from bdecode import DEFAULT_MAX_DEPTH, BencodeAccessError, BencodeDecodeError
from .metainfo import MetainfoError, TorrentMeta

logger = logging.getLogger(__name__)


def setup_logging(verbose=False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog="torrent-dump",
        description="Decode a .torrent file and print its metadata.",
    )
    parser.add_argument("torrent", help="path to the .torrent file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--max-depth", type=positive_int, default=DEFAULT_MAX_DEPTH,
                        help=f"maximum list/dict nesting (default: {DEFAULT_MAX_DEPTH})")
    return parser


def print_meta(meta: TorrentMeta):
    print(f"torrent.comment: {meta.comment}")
    print(f"torrent.announce: {meta.announce}")
    print(f"info.name: {meta.name}")
    print(f"info.piece length: {meta.piece_length}")
    print(f"info.length: {meta.length}")
    print(f"len(info.pieces): {len(meta.pieces)}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        meta = TorrentMeta(args.torrent, max_depth=args.max_depth)
    except OSError as e:
        logger.error("Error reading torrent file %s: %s", args.torrent, e)
        return 1
    except BencodeDecodeError as e:
        logger.error("Error parsing torrent: %s", e)
        return 1
    except (MetainfoError, BencodeAccessError) as e:
        logger.error("Invalid torrent metadata: %s", e)
        return 1

    logger.debug("Info hash: %s", meta.info_hash.hex())
    print_meta(meta)
    return 0


if __name__ == "__main__":
    sys.exit(main())
