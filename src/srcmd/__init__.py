"""srcmd: Srcbook notebook (.src.md) encoder, decoder and tools."""

__all__ = [
    "Notebook",
    "Cell",
    "TitleCell",
    "MarkdownCell",
    "ManifestCell",
    "CodeCell",
    "decode",
    "decode_file",
    "DecodeResult",
    "DecodeError",
    "MissingMetadata",
    "InvalidMetadata",
    "encode",
    "encode_file",
    "random_id",
]

__version__ = "0.1.0"

from .ids import random_id  # noqa: E402
from .model import Notebook, Cell, TitleCell, MarkdownCell, ManifestCell, CodeCell  # noqa: E402
from .parse import (  # noqa: E402
    DecodeError,
    DecodeResult,
    InvalidMetadata,
    MissingMetadata,
    decode,
    decode_file,
)
from .serialize import encode, encode_file  # noqa: E402
