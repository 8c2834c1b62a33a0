"""
On-disk format of the scrobble cache.

- One XML file per user: <submissions product=".." version="2"> holding one
  <track> element per pending play, oldest first.
- Every save rewrites the whole file; an empty cache means no file at all.
- A missing or unreadable file loads as an empty cache.
"""

from __future__ import annotations
import logging
import os
import xml.etree.ElementTree as ET
from typing import Iterable, List

from scrobble_cache.diagnostics import Diagnostics
from scrobble_cache.errors import CacheWriteError
from scrobble_cache.track import Track

FORMAT_VERSION = "2"
ROOT_TAG = "submissions"
TRACK_TAG = "track"

log = logging.getLogger("scrobble_cache")


def load(path: str, diagnostics: Diagnostics) -> List[Track]:
    if not os.path.isfile(path):
        log.debug("No scrobble cache at %s", path)
        return []
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        # Corrupt or unreadable file? Start fresh.
        diagnostics.load_failed(path, e)
        return []
    return [Track.from_element(el) for el in root if el.tag == TRACK_TAG]


def build_document(tracks: Iterable[Track], product: str) -> ET.ElementTree:
    root = ET.Element(ROOT_TAG, {"product": product, "version": FORMAT_VERSION})
    for track in tracks:
        root.append(track.to_element())
    ET.indent(root, space="  ")
    return ET.ElementTree(root)


def save(path: str, tracks: List[Track], product: str, diagnostics: Diagnostics) -> None:
    try:
        if not tracks:
            _remove(path)
            return
        _write(path, build_document(tracks, product))
    except OSError as e:
        diagnostics.save_failed(path, e)
        raise CacheWriteError(path, e) from e


def _remove(path: str) -> None:
    try:
        os.remove(path)
        log.debug("Scrobble cache empty, removed %s", path)
    except FileNotFoundError:
        pass


def _write(path: str, tree: ET.ElementTree) -> None:
    # Write atomically to avoid corruption
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp = f"{path}.tmp"
    try:
        with open(tmp, "wb") as f:
            tree.write(f, encoding="utf-8", xml_declaration=True)
            f.write(b"\n")
        os.replace(tmp, path)
    except OSError:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
