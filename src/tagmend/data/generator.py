"""Synthetic mis-encoded tag generator.

Builds Cyrillic tag values and pushes them through one of the known
corruption chains (the forward direction of each recovery pipeline):
- direct: raw cp1251 bytes stored in a frame labeled Latin-1
- single-roundtrip: cp1251 bytes read back as Latin-1 text
- reencode-roundtrip: the Latin-1 reading saved as UTF-8 and read as cp1251
- mislabel-only: UTF-8 bytes in a frame labeled Latin-1

Used for fixtures, the evaluation harness and benchmarks.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from tagmend.config import SUPPORTED_TAGS
from tagmend.fields import Encoding, TextField
from tagmend.transforms import MISLABEL_CODEPAGE, SOURCE_CODEPAGE

CHAINS: tuple[str, ...] = ("direct", "reencode-roundtrip", "single-roundtrip", "mislabel-only")
PHRASES: Sequence[str] = (
    "Привет",
    "Кино",
    "Группа крови",
    "Звезда по имени Солнце",
    "Аквариум",
    "Город золотой",
    "Ночные снайперы",
    "Ёлки",
    "Машина времени",
    "Поворот",
    "Сплин",
    "Выхода нет",
    "Ленинград",
    "Рок 1987",
)


@dataclass
class SyntheticField:
    field: TextField
    expected: str
    chain: str


def mangle(
    text: str, chain: str, source: str = SOURCE_CODEPAGE, mislabel: str = MISLABEL_CODEPAGE
) -> str | bytes:
    """Corrupt ``text`` the way ``chain`` describes; raises UnicodeError if it cannot."""
    if chain == "direct":
        return text.encode(source)
    if chain == "single-roundtrip":
        return text.encode(source).decode(mislabel)
    if chain == "reencode-roundtrip":
        return text.encode(source).decode(mislabel).encode("utf-8").decode(source)
    if chain == "mislabel-only":
        return text.encode("utf-8").decode(mislabel)
    raise ValueError(f"Unknown chain '{chain}'. Choose from {CHAINS}.")


def generate_synthetic_fields(
    count: int = 8, *, seed: int = 1234, chains: Sequence[str] = CHAINS
) -> list[SyntheticField]:
    """Generate mangled Latin-1 fields paired with the text they came from."""
    rng = random.Random(seed)
    names = list(SUPPORTED_TAGS)
    out: list[SyntheticField] = []
    while len(out) < count:
        phrase = rng.choice(PHRASES)
        chain = rng.choice(chains)
        try:
            mangled = mangle(phrase, chain)
        except UnicodeError:
            # e.g. cp1251 0x98 has no mapping; the chain cannot produce this phrase
            continue
        name = names[len(out) % len(names)]
        out.append(
            SyntheticField(
                field=TextField(name, Encoding.LATIN1, mangled),
                expected=phrase,
                chain=chain,
            )
        )
    return out
