"""
Torrent metadata reading on top of the bdecode value tree.
"""
from .metainfo import MetainfoError, TorrentMeta

__all__ = ['TorrentMeta', 'MetainfoError']
