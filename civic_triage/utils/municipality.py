"""
Municipality name normalization.

Deterministic: the same input always produces the same output. Problems are
stored with the canonical display name so exact-match queries work, and the
pure matchers compare by key so legacy rows with odd casing still match.
"""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def canonical_municipality(name: Optional[str]) -> str:
    """Collapse whitespace and title-case: '  butwal  sub-metro ' -> 'Butwal Sub-Metro'."""
    if not name:
        return ""
    return _WHITESPACE.sub(" ", name.strip()).title()


def municipality_key(name: Optional[str]) -> str:
    return canonical_municipality(name).casefold()


def same_municipality(a: Optional[str], b: Optional[str]) -> bool:
    key = municipality_key(a)
    return bool(key) and key == municipality_key(b)
