from __future__ import annotations

from typing import Callable, Dict, List, Optional

import nbformat

from .filenames import default_extension_for_language
from .ids import random_id
from .model import (
    LANGUAGES,
    MANIFEST_FILENAME,
    TYPESCRIPT,
    Cell,
    CodeCell,
    ManifestCell,
    MarkdownCell,
    Notebook,
    TitleCell,
)


def _with_newline(s: str) -> str:
    return s if s.endswith("\n") or not s else s + "\n"


def srcbook_to_ipynb_dict(nb: Notebook) -> Dict:
    """Convert a Notebook to a minimal Jupyter nbformat v4 dict.

    - title and markdown cells become "markdown" (titles as '# text').
    - package.json becomes a "raw" cell; code cells become "code".
    - The original cell type and filename are kept in
      cell.metadata["srcbook"] so the import restores them.
    """

    def _cell_to_nb(c: Cell) -> Dict:
        meta: Dict = {"srcbook": {"type": c.type}}
        if isinstance(c, TitleCell):
            return {"cell_type": "markdown", "id": c.id, "source": f"# {c.text}\n", "metadata": meta}
        if isinstance(c, MarkdownCell):
            return {"cell_type": "markdown", "id": c.id, "source": _with_newline(c.text), "metadata": meta}
        meta["srcbook"]["filename"] = c.filename
        if isinstance(c, ManifestCell):
            return {"cell_type": "raw", "id": c.id, "source": _with_newline(c.source), "metadata": meta}
        return {
            "cell_type": "code",
            "id": c.id,
            "source": _with_newline(c.source),
            "outputs": [],
            "execution_count": None,
            "metadata": meta,
        }

    return {
        "nbformat": 4,
        "nbformat_minor": 5,
        "metadata": {
            "kernelspec": {"name": nb.language, "display_name": nb.language, "language": nb.language},
            "language_info": {"name": nb.language},
        },
        "cells": [_cell_to_nb(c) for c in nb.cells],
    }


def _notebook_language(meta: Dict) -> Optional[str]:
    ks = meta.get("kernelspec") or {}
    info = meta.get("language_info") or {}
    for candidate in (ks.get("language"), ks.get("name"), info.get("name")):
        if isinstance(candidate, str) and candidate.lower() in LANGUAGES:
            return candidate.lower()
    return None


def ipynb_dict_to_srcbook(
    d: Dict,
    *,
    language: Optional[str] = None,
    default_language: str = TYPESCRIPT,
    path: Optional[str] = None,
    new_id: Callable[[], str] = random_id,
) -> Notebook:
    """Convert a Jupyter nbformat v4 dict to a Notebook.

    - Cells carrying srcbook metadata regain their original type and filename.
    - Otherwise: markdown -> markdown, code -> code named cell-<n><ext>,
      raw -> markdown. Empty cells are skipped.
    - Language: the argument, then the kernelspec when it names
      javascript/typescript, else default_language.
    """
    meta = d.get("metadata", {}) if isinstance(d, dict) else {}
    lang = language or _notebook_language(meta if isinstance(meta, dict) else {}) or default_language
    ext = default_extension_for_language(lang)

    cells: List[Cell] = []
    code_count = 0
    for jc in d.get("cells", []) if isinstance(d, dict) else []:
        if not isinstance(jc, dict):
            continue
        src = jc.get("source", "")
        body = ("".join(src) if isinstance(src, list) else str(src)).rstrip("\n")
        jmeta = jc.get("metadata") or {}
        sb = jmeta.get("srcbook") if isinstance(jmeta, dict) else None
        sb = sb if isinstance(sb, dict) else {}
        ctype = sb.get("type")
        jtype = str(jc.get("cell_type") or "raw")

        if ctype == "title" and body.startswith("# "):
            cells.append(TitleCell(text=body[2:].strip(), id=new_id()))
        elif ctype == "manifest" or sb.get("filename") == MANIFEST_FILENAME:
            cells.append(ManifestCell(source=body, id=new_id()))
        elif jtype == "code":
            code_count += 1
            filename = sb.get("filename") or f"cell-{code_count}{ext}"
            cells.append(CodeCell(filename=filename, source=body, language=lang, id=new_id()))
        elif body.strip():
            cells.append(MarkdownCell(text=body.strip(), id=new_id()))

    return Notebook(language=lang, cells=cells, path=path)


def export_ipynb_text(nb: Notebook) -> str:
    nbnode = nbformat.from_dict(srcbook_to_ipynb_dict(nb))
    s = nbformat.writes(nbnode, version=4)
    if not s.endswith("\n"):
        s += "\n"
    return s


def import_ipynb_text(
    text: str,
    *,
    language: Optional[str] = None,
    default_language: str = TYPESCRIPT,
    path: Optional[str] = None,
) -> Notebook:
    nbnode = nbformat.reads(text, as_version=4)
    return ipynb_dict_to_srcbook(nbnode, language=language, default_language=default_language, path=path)


def export_file_to_ipynb(in_path: str, out_path: Optional[str] = None) -> None:
    from .parse import decode_file

    text = export_ipynb_text(decode_file(in_path))
    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        print(text, end="")


def import_ipynb_file(
    in_path: str,
    out_path: Optional[str] = None,
    *,
    language: Optional[str] = None,
    default_language: str = TYPESCRIPT,
) -> None:
    from .serialize import encode

    with open(in_path, "r", encoding="utf-8") as f:
        nb = import_ipynb_text(f.read(), language=language, default_language=default_language, path=in_path)
    out_text = encode(nb)
    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(out_text)
    else:
        print(out_text, end="")
