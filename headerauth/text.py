"""Plain string helpers."""

from __future__ import annotations


def contains(haystack: str, needle: str) -> bool:
    """Report whether ``needle`` occurs as a contiguous run inside ``haystack``.

    Naive scan over every offset where ``needle`` fits. The empty needle is
    contained in everything.
    """
    width = len(needle)
    if width == 0:
        return True
    for i in range(len(haystack) - width + 1):
        if haystack[i : i + width] == needle:
            return True
    return False
