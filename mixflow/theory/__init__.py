"""
Theory module for music theory utilities.

Contains the Camelot wheel key compatibility model.
"""

from .camelot import (
    CAMELOT_WHEEL,
    VALID_CAMELOT_KEYS,
    KeyCompatibility,
    KeyPosition,
    classify,
    compatible_keys,
    distance,
    is_compatible,
    key_label,
    parse_camelot,
    resolve_key,
)

__all__ = [
    "CAMELOT_WHEEL",
    "VALID_CAMELOT_KEYS",
    "KeyCompatibility",
    "KeyPosition",
    "classify",
    "compatible_keys",
    "distance",
    "is_compatible",
    "key_label",
    "parse_camelot",
    "resolve_key",
]
