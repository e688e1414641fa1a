from __future__ import annotations

import json

from .model import CodeCell, ManifestCell, MarkdownCell, Notebook, TitleCell

FENCE = "```"
METADATA_PREFIX = "<!-- srcbook:"
METADATA_SUFFIX = " -->"
FILE_HEADER = "###### "


def _metadata_line(language: str) -> str:
    payload = json.dumps({"language": language}, separators=(",", ":"))
    return f"{METADATA_PREFIX}{payload}{METADATA_SUFFIX}"


def _file_block(filename: str, tag: str, source: str) -> str:
    return f"{FILE_HEADER}{filename}\n\n{FENCE}{tag}\n{source}\n{FENCE}"


def encode(nb: Notebook, *, inline: bool = False) -> str:
    """Render a notebook as Srcbook markdown.

    ``inline`` is accepted for API compatibility and currently has no effect.
    """
    parts = [_metadata_line(nb.language)]
    for cell in nb.cells:
        if isinstance(cell, TitleCell):
            parts.append(f"# {cell.text}")
        elif isinstance(cell, MarkdownCell):
            parts.append(cell.text)
        elif isinstance(cell, ManifestCell):
            parts.append(_file_block(cell.filename, "json", cell.source))
        elif isinstance(cell, CodeCell):
            parts.append(_file_block(cell.filename, cell.language, cell.source))
        else:
            raise TypeError(f"Not a notebook cell: {cell!r}")
    return "".join(p + "\n\n" for p in parts)


def encode_file(nb: Notebook, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(encode(nb))
