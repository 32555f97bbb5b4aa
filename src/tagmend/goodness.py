"""Goodness scoring for recovered text.

A candidate string is judged by how many of its characters fall inside the
alphabet we expect in repaired tags: ASCII plus the basic Russian Cyrillic
block and the two "Yo" letters. Anything else (Latin-1 accents, box drawing,
Serbian/Ukrainian letters produced by a wrong code page) counts against it.
"""

from __future__ import annotations

ASCII_MAX = 0x7F
CYRILLIC_RANGE = (0x0410, 0x044F)
YO_LETTERS = frozenset({0x0401, 0x0451})


def is_good_char(ch: str) -> bool:
    code = ord(ch)
    if code <= ASCII_MAX:
        return True
    if CYRILLIC_RANGE[0] <= code <= CYRILLIC_RANGE[1]:
        return True
    return code in YO_LETTERS


def as_unicode(value: str | bytes) -> str | None:
    """Return the text form of ``value`` or None when it is not well-formed."""
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates
        return None
    return value


def is_well_formed(value: str | bytes) -> bool:
    return as_unicode(value) is not None


def score(value: str | bytes) -> float:
    """Fraction of characters that are ASCII or accepted Cyrillic, in [0, 1].

    Malformed input scores 0.0; the empty string scores 1.0.
    """
    text = as_unicode(value)
    if text is None:
        return 0.0
    total = len(text)
    if total == 0:
        return 1.0
    bad = sum(1 for ch in text if not is_good_char(ch))
    return (total - bad) / total


def is_recovered(value: str | bytes) -> bool:
    """Boolean form of the scorer: well-formed and every character accepted."""
    return is_well_formed(value) and score(value) >= 1.0
