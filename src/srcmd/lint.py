from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, Tuple

from .filenames import extensions_for_language, valid_filename
from .model import (
    CELL_STATUSES,
    MANIFEST_FILENAME,
    CodeCell,
    ManifestCell,
    Notebook,
    TitleCell,
)


@dataclass
class LintIssue:
    level: str  # "ERROR" | "WARN"
    message: str


def _extension(filename: str) -> str:
    _, dot, ext = filename.rpartition(".")
    return ext if dot else ""


def lint_notebook(nb: Notebook) -> Tuple[List[LintIssue], List[LintIssue]]:
    errors: List[LintIssue] = []
    warns: List[LintIssue] = []

    # IDs unique
    seen = set()
    for c in nb.cells:
        if not c.id:
            errors.append(LintIssue("ERROR", f"{c.type} cell missing id"))
        elif c.id in seen:
            errors.append(LintIssue("ERROR", f"Duplicate cell id: {c.id}"))
        seen.add(c.id)

    try:
        allowed = extensions_for_language(nb.language)
    except ValueError as e:
        errors.append(LintIssue("ERROR", str(e)))
        allowed = []

    filenames = set()
    for c in nb.code_cells():
        if c.filename == MANIFEST_FILENAME:
            errors.append(LintIssue("ERROR", "Code cell may not be named package.json"))
            continue
        if allowed and _extension(c.filename) not in allowed:
            errors.append(
                LintIssue(
                    "ERROR",
                    f"{c.filename}: extension not valid for {nb.language} (expected one of {', '.join(allowed)})",
                )
            )
        elif not valid_filename(c.filename):
            warns.append(LintIssue("WARN", f"{c.filename}: unusual filename"))
        if c.language != nb.language:
            errors.append(
                LintIssue("ERROR", f"{c.filename}: cell language {c.language} differs from notebook language {nb.language}")
            )
        if c.filename in filenames:
            errors.append(LintIssue("ERROR", f"Duplicate filename: {c.filename}"))
        filenames.add(c.filename)

    for c in nb.cells:
        if isinstance(c, (CodeCell, ManifestCell)) and c.status not in CELL_STATUSES:
            errors.append(LintIssue("ERROR", f"{c.filename}: unknown status {c.status!r}"))

    manifests = [c for c in nb.cells if isinstance(c, ManifestCell)]
    if len(manifests) > 1:
        warns.append(LintIssue("WARN", f"{len(manifests)} package.json cells; only one is expected"))
    for m in manifests:
        try:
            data = json.loads(m.source)
        except json.JSONDecodeError as e:
            warns.append(LintIssue("WARN", f"package.json is not valid JSON: {e}"))
            continue
        if not isinstance(data, dict):
            warns.append(LintIssue("WARN", "package.json is not a JSON object"))

    titles = [i for i, c in enumerate(nb.cells) if isinstance(c, TitleCell)]
    if len(titles) > 1:
        warns.append(LintIssue("WARN", f"{len(titles)} title cells; only one is expected"))
    if titles and titles[0] != 0:
        warns.append(LintIssue("WARN", "Title is not the first cell"))

    return errors, warns
