from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from .ids import random_id
from .model import (
    JAVASCRIPT,
    LANGUAGES,
    MANIFEST_FILENAME,
    Cell,
    CodeCell,
    ManifestCell,
    MarkdownCell,
    Notebook,
    TitleCell,
)
from .serialize import FENCE, FILE_HEADER

logger = logging.getLogger(__name__)

# Stops at the first " -->", so a JSON string containing " -->" is truncated
# and reported as InvalidMetadata.
_METADATA_RE = re.compile(r"<!-- srcbook:(.*?) -->")
TITLE_PREFIX = "# "


class DecodeError(ValueError):
    """Base class for fatal decode failures."""


class MissingMetadata(DecodeError):
    pass


class InvalidMetadata(DecodeError):
    pass


@dataclass
class DecodeResult:
    error: bool
    notebook: Optional[Notebook] = None
    errors: List[str] = field(default_factory=list)
    cause: Optional[DecodeError] = None

    def unwrap(self) -> Notebook:
        if self.error or self.notebook is None:
            raise self.cause or DecodeError("; ".join(self.errors))
        return self.notebook


def _read_metadata(text: str) -> Tuple[str, str]:
    """Return (language, text with the metadata marker removed)."""
    m = _METADATA_RE.search(text)
    if not m:
        raise MissingMetadata("Missing srcbook metadata")
    try:
        meta = json.loads(m.group(1))
    except (ValueError, RecursionError) as e:
        raise InvalidMetadata(f"Invalid srcbook metadata: {e}") from e
    if not isinstance(meta, dict):
        raise InvalidMetadata("Invalid srcbook metadata: expected a JSON object")
    language = meta.get("language") or JAVASCRIPT
    if not isinstance(language, str):
        language = json.dumps(language)
    if language not in LANGUAGES:
        logger.debug("Notebook language %r is not javascript or typescript", language)
    return language, text[: m.start()] + text[m.end() :]


def _is_block_start(line: str) -> bool:
    return (
        line.startswith(TITLE_PREFIX)
        or line.startswith(FILE_HEADER)
        or line.startswith(FENCE)
    )


def _decode_cells(text: str, language: str, new_id: Callable[[], str]) -> List[Cell]:
    lines = text.split("\n")
    n = len(lines)
    cells: List[Cell] = []
    pending: Optional[Union[CodeCell, ManifestCell]] = None
    in_fence = False
    fence_tag = ""
    body: List[str] = []

    idx = 0
    while idx < n:
        line = lines[idx]

        if in_fence:
            if line.startswith(FENCE):
                in_fence = False
                if pending is not None:
                    pending.source = "\n".join(body)
                    cells.append(pending)
                    pending = None
                else:
                    logger.debug("Dropping fenced block (%s) with no file header", fence_tag or "untagged")
                body = []
            else:
                body.append(line)
            idx += 1
            continue

        if line.startswith(TITLE_PREFIX):
            cells.append(TitleCell(text=line[len(TITLE_PREFIX):].strip(), id=new_id()))
            idx += 1
            continue

        if line.startswith(FILE_HEADER):
            filename = line[len(FILE_HEADER):].strip()
            if pending is not None:
                logger.debug("File header %s replaces unclosed %s", filename, pending.filename)
            if filename == MANIFEST_FILENAME:
                pending = ManifestCell(source="", id=new_id())
            else:
                pending = CodeCell(filename=filename, source="", language=language, id=new_id())
            idx += 1
            continue

        if line.startswith(FENCE):
            in_fence = True
            fence_tag = line[len(FENCE):].strip()
            body = []
            idx += 1
            continue

        if not line.strip():
            idx += 1
            continue

        # Markdown: absorb until the next block start; blank lines are dropped.
        md_lines = [line]
        idx += 1
        while idx < n and not _is_block_start(lines[idx]):
            if lines[idx].strip():
                md_lines.append(lines[idx])
            idx += 1
        cells.append(MarkdownCell(text="\n".join(md_lines).strip(), id=new_id()))

    if in_fence:
        logger.warning("Unterminated fenced block at end of input; %d line(s) discarded", len(body))
    elif pending is not None:
        logger.warning("File header %s has no fenced block; cell discarded", pending.filename)
    return cells


def decode(text: str, *, new_id: Callable[[], str] = random_id) -> DecodeResult:
    """Parse Srcbook markdown into a Notebook.

    Only a missing or malformed ``<!-- srcbook:{...} -->`` marker is fatal;
    every other irregularity is skipped. Never raises.
    """
    try:
        language, rest = _read_metadata(text.replace("\r\n", "\n"))
    except DecodeError as e:
        return DecodeResult(error=True, errors=[str(e)], cause=e)
    cells = _decode_cells(rest, language, new_id)
    return DecodeResult(error=False, notebook=Notebook(language=language, cells=cells))


def decode_file(path: str) -> Notebook:
    with open(path, "r", encoding="utf-8") as f:
        nb = decode(f.read()).unwrap()
    nb.path = path
    return nb
