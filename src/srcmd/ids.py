from __future__ import annotations

import secrets
from typing import Callable, Optional

Entropy = Callable[[int], bytes]


def random_id(byte_size: int = 8, entropy: Optional[Entropy] = None) -> str:
    """Return a hex identifier built from ``byte_size`` bytes of entropy.

    ``entropy`` is called as ``entropy(n)`` and must return ``n`` bytes;
    it defaults to ``secrets.token_bytes``.
    """
    draw = entropy or secrets.token_bytes
    return draw(byte_size).hex()
