"""Deterministic pseudo-embeddings used when no provider is configured."""

import math

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def text_hash(text: str) -> int:
    """Signed 32-bit rolling hash (``h = 31 * h + unit``) over UTF-16 code units.

    Matches the classic ``String.hashCode`` so hashes agree with browser-side
    code computing the same value.
    """
    data = text.encode("utf-16-le")

    h = 0
    for low, high in zip(data[::2], data[1::2]):
        h = (31 * h + (high << 8 | low)) & _INT32_MASK
    return h - (1 << 32) if h & _INT32_SIGN else h


def mock_embedding(text: str, dimensions: int) -> list[float]:
    """Build a fixed-length vector in [0, 1] from the text hash.

    Not semantically meaningful: equal texts give identical vectors, which is
    all the pipeline and its tests need without a live provider.
    """
    if dimensions <= 0:
        raise ValueError(f"dimensions must be positive, got {dimensions}")

    base = text_hash(text)
    return [math.sin(base + i) / 2 + 0.5 for i in range(dimensions)]
