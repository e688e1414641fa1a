from __future__ import annotations

import json
from collections import OrderedDict
from typing import Iterable

from .model import ManifestCell
from .parse import decode
from .serialize import encode

_MANIFEST_KEY_ORDER: list[str] = [
    "name",
    "version",
    "private",
    "description",
    "type",
    "main",
    "scripts",
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "engines",
]


def _reorder_mapping(m: "OrderedDict[str, object]", order: Iterable[str]) -> "OrderedDict[str, object]":
    # Known keys first in the given order, then others in original order
    known = [k for k in order if k in m]
    others = [k for k in m.keys() if k not in known]
    return OrderedDict((k, m[k]) for k in known + others)


def format_manifest_source(source: str) -> str:
    """Canonical key order and two-space indent; unparseable input is returned unchanged."""
    try:
        data = json.loads(source, object_pairs_hook=OrderedDict)
    except json.JSONDecodeError:
        return source
    if not isinstance(data, OrderedDict):
        return source
    return json.dumps(_reorder_mapping(data, _MANIFEST_KEY_ORDER), indent=2, ensure_ascii=False)


def format_text(text: str) -> str:
    nb = decode(text).unwrap()
    for cell in nb.cells:
        if isinstance(cell, ManifestCell):
            cell.source = format_manifest_source(cell.source)
    return encode(nb)
