from __future__ import annotations

import re
from typing import List, Optional

from .ids import Entropy, random_id
from .model import JAVASCRIPT, TYPESCRIPT

_VALID_FILENAME = re.compile(r"^[a-zA-Z0-9_-]+\.(js|cjs|mjs|ts|cts|mts)$")
_JS_FILE = re.compile(r"\.(js|cjs|mjs)$")
_TS_FILE = re.compile(r"\.(ts|cts|mts)$")

_EXTENSIONS = {
    JAVASCRIPT: ["js", "cjs", "mjs"],
    TYPESCRIPT: ["ts", "cts", "mts"],
}


def valid_filename(filename: str) -> bool:
    return bool(_VALID_FILENAME.match(filename))


def is_javascript_file(filename: str) -> bool:
    return bool(_JS_FILE.search(filename))


def is_typescript_file(filename: str) -> bool:
    return bool(_TS_FILE.search(filename))


def language_from_filename(filename: str) -> str:
    if is_javascript_file(filename):
        return JAVASCRIPT
    if is_typescript_file(filename):
        return TYPESCRIPT
    raise ValueError(
        f"Language is not one of 'javascript' or 'typescript' based on filename '{filename}'"
    )


def extensions_for_language(language: str) -> List[str]:
    try:
        return list(_EXTENSIONS[language])
    except KeyError:
        raise ValueError(f"Unrecognized language {language}") from None


def default_extension_for_language(language: str) -> str:
    return "." + extensions_for_language(language)[0]


def porting_filename(
    title: str, language: str = TYPESCRIPT, entropy: Optional[Entropy] = None
) -> str:
    """Derive a code cell filename from a free-form step title.

    'Parse CSV rows!' -> 'parse-csv-rows-1a2b3c4d.ts'
    """
    slug = re.sub(r"[^a-z0-9]", "-", title.lower())
    slug = re.sub(r"-+", "-", slug).strip("-")[:30]
    ext = default_extension_for_language(language)
    return f"{slug}-{random_id(4, entropy)}{ext}"
