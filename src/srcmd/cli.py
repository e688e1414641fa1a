from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import Counter
from functools import partial
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML

from .config import Config, load_config
from .filenames import porting_filename, valid_filename
from .fmt import format_text
from .ids import random_id
from .jupyter import export_file_to_ipynb, import_ipynb_file
from .lint import lint_notebook
from .log import setup_logging
from .model import LANGUAGES, CodeCell, ManifestCell, MarkdownCell, Notebook, TitleCell
from .parse import DecodeError, decode_file
from .serialize import encode_file

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST = {"type": "module", "dependencies": {}}


def _cmd_fmt(path: Path, *, check: bool = False) -> int:
    original = path.read_text(encoding="utf-8")
    text = format_text(original)
    if check:
        if text != original:
            print(f"Would reformat: {path}")
            return 1
        print(f"Already formatted: {path}")
        return 0
    path.write_text(text, encoding="utf-8")
    print(f"Formatted: {path}")
    return 0


def _cmd_lint(path: Path, cfg: Config) -> int:
    nb = decode_file(str(path))
    errors, warns = lint_notebook(nb)
    for w in warns:
        print(f"WARN: {w.message}")
    for e in errors:
        print(f"ERROR: {e.message}")
    if errors or (cfg.strict and warns):
        return 1
    print("OK: no lint errors")
    return 0


def _cmd_info(path: Path) -> int:
    nb = decode_file(str(path))
    counts = Counter(c.type for c in nb.cells)
    titles = [c.text for c in nb.cells if isinstance(c, TitleCell)]
    summary = {
        "path": str(path),
        "title": titles[0] if titles else None,
        "language": nb.language,
        "cells": {
            "total": len(nb.cells),
            "title": counts.get("title", 0),
            "markdown": counts.get("markdown", 0),
            "manifest": counts.get("manifest", 0),
            "code": counts.get("code", 0),
        },
        "files": [c.filename for c in nb.code_cells()],
    }
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.dump(summary, sys.stdout)
    return 0


def _cmd_new(path: Path, title: str, language: str, cfg: Config) -> int:
    if path.exists():
        print(f"new: {path} already exists", file=sys.stderr)
        return 1
    new_id = partial(random_id, cfg.id_bytes)
    nb = Notebook(
        language=language,
        cells=[
            TitleCell(text=title, id=new_id()),
            ManifestCell(source=json.dumps(DEFAULT_MANIFEST, indent=2), id=new_id()),
        ],
    )
    encode_file(nb, str(path))
    print(f"Created: {path}")
    return 0


def _cmd_add(
    path: Path,
    source: Path,
    cfg: Config,
    *,
    filename: Optional[str] = None,
    heading: Optional[str] = None,
) -> int:
    nb = decode_file(str(path))
    new_id = partial(random_id, cfg.id_bytes)
    if not filename:
        filename = source.name
        if not valid_filename(filename):
            filename = porting_filename(heading or source.stem, nb.language)
    taken = {c.filename for c in nb.code_cells()}
    if filename in taken:
        print(f"add: {filename} already exists in {path}", file=sys.stderr)
        return 1
    if heading:
        nb.cells.append(MarkdownCell(text=f"## {heading}", id=new_id()))
    nb.cells.append(
        CodeCell(
            filename=filename,
            source=source.read_text(encoding="utf-8").rstrip("\n"),
            language=nb.language,
            id=new_id(),
        )
    )
    encode_file(nb, str(path))
    logger.info("Appended %s to %s", filename, path)
    print(f"Added: {filename}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="srcmd", description="Srcbook notebook (.src.md) tools")
    parser.add_argument("--config", help="Path to a .srcmd.yaml config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_fmt = sub.add_parser("fmt", help="Rewrite a .src.md file in canonical form")
    p_fmt.add_argument("file")
    p_fmt.add_argument("--check", action="store_true", help="Only report whether the file would change")

    p_lint = sub.add_parser("lint", help="Check filenames, ids and package.json")
    p_lint.add_argument("file")

    p_info = sub.add_parser("info", help="Print a YAML summary of a notebook")
    p_info.add_argument("file")

    p_new = sub.add_parser("new", help="Create a notebook with a title and package.json")
    p_new.add_argument("file")
    p_new.add_argument("--title", required=True)
    p_new.add_argument("--language", choices=LANGUAGES, help="Defaults to the configured language")

    p_add = sub.add_parser("add", help="Append a code cell from a source file")
    p_add.add_argument("file", help="Notebook to extend")
    p_add.add_argument("source", help="Source file whose text becomes the cell")
    p_add.add_argument("--filename", help="Cell filename (default: source file name)")
    p_add.add_argument("--heading", help="Markdown heading placed before the cell")

    p_export = sub.add_parser("export", help="Export .src.md to .ipynb")
    p_export.add_argument("file", help="Input .src.md file")
    p_export.add_argument("-o", "--output", help="Output .ipynb file (default: stdout)")

    p_import = sub.add_parser("import", help="Import .ipynb to .src.md")
    p_import.add_argument("file", help="Input .ipynb file")
    p_import.add_argument("-o", "--output", help="Output .src.md file (default: stdout)")
    p_import.add_argument("--language", choices=LANGUAGES, help="Override the notebook language")

    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    setup_logging("DEBUG" if args.verbose else cfg.log_level, cfg.log_format, force=True)

    cmd = args.cmd
    path = Path(args.file)
    try:
        if cmd == "fmt":
            return _cmd_fmt(path, check=args.check)
        if cmd == "lint":
            return _cmd_lint(path, cfg)
        if cmd == "info":
            return _cmd_info(path)
        if cmd == "new":
            return _cmd_new(path, args.title, args.language or cfg.language, cfg)
        if cmd == "add":
            return _cmd_add(path, Path(args.source), cfg, filename=args.filename, heading=args.heading)
        if cmd == "export":
            export_file_to_ipynb(str(path), args.output)
            return 0
        if cmd == "import":
            import_ipynb_file(str(path), args.output, language=args.language, default_language=cfg.language)
            return 0
    except (DecodeError, ValueError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    parser.error(f"unknown command {cmd}")
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
