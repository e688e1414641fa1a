from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .ids import random_id

JAVASCRIPT = "javascript"
TYPESCRIPT = "typescript"
LANGUAGES = (JAVASCRIPT, TYPESCRIPT)

MANIFEST_FILENAME = "package.json"
CELL_STATUSES = ("idle", "running", "failed")


@dataclass
class TitleCell:
    """Document-level heading, rendered as ``# <text>``."""

    text: str
    id: str = field(default_factory=random_id)
    type: str = field(default="title", init=False)


@dataclass
class MarkdownCell:
    text: str
    id: str = field(default_factory=random_id)
    type: str = field(default="markdown", init=False)


@dataclass
class ManifestCell:
    """The notebook's ``package.json``.

    status: idle | running | failed; never encoded, reset to idle on decode.
    """

    source: str
    id: str = field(default_factory=random_id)
    status: str = "idle"
    filename: str = field(default=MANIFEST_FILENAME, init=False)
    type: str = field(default="manifest", init=False)


@dataclass
class CodeCell:
    """A named source file.

    language mirrors the notebook language; source is the fenced body
    without the fence lines.
    """

    filename: str
    source: str
    language: str
    id: str = field(default_factory=random_id)
    status: str = "idle"
    type: str = field(default="code", init=False)


Cell = Union[TitleCell, MarkdownCell, ManifestCell, CodeCell]


@dataclass
class Notebook:
    """A Srcbook notebook.

    language: "javascript" or "typescript"; metadata only.
    cells: ordered list of Cell in document order.
    path: optional file path origin, not part of the text form.
    """

    language: str
    cells: List[Cell] = field(default_factory=list)
    path: Optional[str] = None

    def cell_by_id(self) -> Dict[str, Cell]:
        return {c.id: c for c in self.cells}

    def code_cells(self) -> List[CodeCell]:
        return [c for c in self.cells if isinstance(c, CodeCell)]
