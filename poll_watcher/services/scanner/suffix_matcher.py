from typing import Iterable, Optional


def match_suffix(name: str, suffixes: Iterable[str]) -> Optional[str]:
    """Return the first suffix that name ends with, or None."""
    for suffix in suffixes:
        if name.endswith(suffix):
            return suffix
    return None


def matches_any_suffix(name: str, suffixes: Iterable[str]) -> bool:
    return match_suffix(name, suffixes) is not None
