"""
Camelot Wheel - key compatibility model for harmonic mixing.

The Camelot Wheel is Mark Davis's (Mixed In Key) system for organizing
the 24 musical keys in a circle for easy harmonic mixing.

Outer circle (B) = MAJOR keys
Inner circle (A) = MINOR keys

From any position, the compatible moves are:
- Same key (8B -> 8B)
- One hour either way, same ring (8B -> 7B, 9B; 12B wraps to 1B)
- Inner/outer switch on the same hour (8B <-> 8A)
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional

WHEEL_SIZE = 12

MINOR = "A"
MAJOR = "B"


class KeyCompatibility(Enum):
    """Relationship between two positions on the wheel."""
    SAME = "same"
    RELATIVE = "relative"
    ADJACENT = "adjacent"
    INCOMPATIBLE = "incompatible"


@dataclass(frozen=True)
class KeyPosition:
    """A slot on the wheel: hour 1-12 plus ring letter (A minor, B major)."""
    number: int
    letter: str

    @property
    def camelot(self) -> str:
        return f"{self.number}{self.letter}"

    @property
    def is_minor(self) -> bool:
        return self.letter == MINOR

    def __str__(self) -> str:
        return self.camelot


# Tonic spellings per wheel slot; the first spelling is the canonical one
CAMELOT_WHEEL: Mapping[str, dict] = MappingProxyType({
    # Minor keys (A) - inner circle
    "1A": {"tonics": ("Ab", "G#"), "scale": "minor"},
    "2A": {"tonics": ("Eb", "D#"), "scale": "minor"},
    "3A": {"tonics": ("Bb", "A#"), "scale": "minor"},
    "4A": {"tonics": ("F",), "scale": "minor"},
    "5A": {"tonics": ("C",), "scale": "minor"},
    "6A": {"tonics": ("G",), "scale": "minor"},
    "7A": {"tonics": ("D",), "scale": "minor"},
    "8A": {"tonics": ("A",), "scale": "minor"},
    "9A": {"tonics": ("E",), "scale": "minor"},
    "10A": {"tonics": ("B",), "scale": "minor"},
    "11A": {"tonics": ("F#", "Gb"), "scale": "minor"},
    "12A": {"tonics": ("C#", "Db"), "scale": "minor"},
    # Major keys (B) - outer circle
    "1B": {"tonics": ("B",), "scale": "major"},
    "2B": {"tonics": ("F#", "Gb"), "scale": "major"},
    "3B": {"tonics": ("Db", "C#"), "scale": "major"},
    "4B": {"tonics": ("Ab", "G#"), "scale": "major"},
    "5B": {"tonics": ("Eb", "D#"), "scale": "major"},
    "6B": {"tonics": ("Bb", "A#"), "scale": "major"},
    "7B": {"tonics": ("F",), "scale": "major"},
    "8B": {"tonics": ("C",), "scale": "major"},
    "9B": {"tonics": ("G",), "scale": "major"},
    "10B": {"tonics": ("D",), "scale": "major"},
    "11B": {"tonics": ("A",), "scale": "major"},
    "12B": {"tonics": ("E",), "scale": "major"},
})

VALID_CAMELOT_KEYS = tuple(
    f"{number}{letter}"
    for number in range(1, WHEEL_SIZE + 1)
    for letter in (MINOR, MAJOR)
)


def _build_label_table() -> Mapping[str, KeyPosition]:
    """
    Expand the wheel into every accepted spelling, lower-cased.

    Each tonic gets its long form ("f# minor", "c major") and its short
    form ("f#m" for minor, bare "c" for major).
    """
    table = {}
    for code, data in CAMELOT_WHEEL.items():
        position = KeyPosition(int(code[:-1]), code[-1])
        for tonic in data["tonics"]:
            tonic = tonic.lower()
            table[f"{tonic} {data['scale']}"] = position
            short = f"{tonic}m" if data["scale"] == "minor" else tonic
            table[short] = position
    return MappingProxyType(table)


_LABEL_TO_POSITION = _build_label_table()


def parse_camelot(code: str) -> Optional[KeyPosition]:
    """
    Parse Camelot notation ("8A", " 12b ") into a key position.

    Returns:
        KeyPosition, or None if the notation is invalid
    """
    if not code:
        return None

    code = code.strip().upper()
    if len(code) < 2 or code[-1] not in (MINOR, MAJOR):
        return None

    digits = code[:-1]
    if not digits.isdigit():
        return None

    number = int(digits)
    if not 1 <= number <= WHEEL_SIZE:
        return None

    return KeyPosition(number, code[-1])


def resolve_key(label: Optional[str]) -> Optional[KeyPosition]:
    """
    Resolve a key label to its position on the wheel.

    Accepts musical notation ("C major", "Am", "F#", "Gb minor") and
    Camelot notation ("8B"). Matching ignores case and surrounding
    whitespace; nothing fuzzier than that.

    Args:
        label: Key label as produced by the analysis provider

    Returns:
        KeyPosition, or None when the label has no mapping
    """
    if not label:
        return None

    position = parse_camelot(label)
    if position is not None:
        return position

    return _LABEL_TO_POSITION.get(label.strip().lower())


def key_label(position: KeyPosition) -> str:
    """Canonical musical label for a position, e.g. "C major" or "A minor"."""
    data = CAMELOT_WHEEL[position.camelot]
    return f"{data['tonics'][0]} {data['scale']}"


def _circular_distance(a: int, b: int) -> int:
    """Shortest way around the 12-hour wheel (0-6)."""
    diff = abs(a - b)
    return min(diff, WHEEL_SIZE - diff)


def distance(key_a: KeyPosition, key_b: KeyPosition) -> int:
    """
    Scalar distance between two positions, used for ranking.

    Examples:
        8B -> 8B: 0 (same)
        8B -> 9B: 1 (adjacent)
        8B -> 8A: 1 (relative major/minor)
        8B -> 9A: 2 (diagonal, one hour plus a ring change)
        8B -> 2B: 6 (opposite side of the wheel)

    Returns:
        Integer from 0 to 7
    """
    hours = _circular_distance(key_a.number, key_b.number)
    letter_differs = key_a.letter != key_b.letter

    if hours == 0 and letter_differs:
        return 1

    if letter_differs:
        return hours + 1

    return hours


def classify(key_a: KeyPosition, key_b: KeyPosition) -> KeyCompatibility:
    """
    Classify the relationship between two positions.

    | Movement          | Type         | Example     |
    |-------------------|--------------|-------------|
    | Same slot         | SAME         | 8B -> 8B    |
    | Ring switch       | RELATIVE     | 8B -> 8A    |
    | +/-1, same ring   | ADJACENT     | 8B -> 9B    |
    | Anything else     | INCOMPATIBLE | 8B -> 3B    |
    """
    if key_a.number == key_b.number:
        if key_a.letter == key_b.letter:
            return KeyCompatibility.SAME
        return KeyCompatibility.RELATIVE

    if key_a.letter == key_b.letter and _circular_distance(key_a.number, key_b.number) == 1:
        return KeyCompatibility.ADJACENT

    return KeyCompatibility.INCOMPATIBLE


def is_compatible(key_a: KeyPosition, key_b: KeyPosition) -> bool:
    """True if the two keys can be mixed (same, relative or adjacent)."""
    return classify(key_a, key_b) is not KeyCompatibility.INCOMPATIBLE


def compatible_keys(position: KeyPosition) -> List[KeyPosition]:
    """
    Get every position that mixes with the given one.

    Returns:
        [same, +1, -1, relative]
    """
    next_num = (position.number % WHEEL_SIZE) + 1
    prev_num = ((position.number - 2) % WHEEL_SIZE) + 1
    other_letter = MAJOR if position.is_minor else MINOR

    return [
        position,
        KeyPosition(next_num, position.letter),
        KeyPosition(prev_num, position.letter),
        KeyPosition(position.number, other_letter),
    ]
