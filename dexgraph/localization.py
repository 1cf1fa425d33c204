"""Language ids and localized-name resolution."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Iterable, Mapping, Optional


class LanguageId(IntEnum):
    """PokeAPI language ids."""

    JAPANESE = 1
    ROOMAJI = 2
    KOREAN = 3
    CHINESE_TRADITIONAL = 4
    FRENCH = 5
    GERMAN = 6
    SPANISH = 7
    ITALIAN = 8
    ENGLISH = 9
    CZECH = 10
    JAPANESE_KANJI = 11
    CHINESE_SIMPLIFIED = 12


# Universal fallback language.
DEFAULT_LANGUAGE = LanguageId.ENGLISH


def coerce_language(value: Any) -> LanguageId:
    """Turn a caller-supplied id into a LanguageId, defaulting to English."""
    try:
        return LanguageId(int(value))
    except (TypeError, ValueError):
        return DEFAULT_LANGUAGE


def resolve(variants: Optional[Iterable[Mapping[str, Any]]], language_id: int) -> Optional[str]:
    """Return the name whose ``language_id`` matches, if any.

    Args:
        variants: ``[{"name": ..., "language_id": ...}]`` rows from the query layer.
        language_id: Requested language id.

    Returns:
        The matching non-empty name, or None.
    """
    for variant in variants or ():
        if variant.get("language_id") == language_id and variant.get("name"):
            return variant["name"]
    return None


def resolve_with_fallback(
    variants: Optional[Iterable[Mapping[str, Any]]],
    language_id: int,
    base_name: str,
) -> str:
    """Resolve a display name: requested language, then English, then ``base_name``."""
    # Materialize once so generators survive the second pass.
    rows = list(variants or ())
    return resolve(rows, language_id) or resolve(rows, DEFAULT_LANGUAGE) or base_name
