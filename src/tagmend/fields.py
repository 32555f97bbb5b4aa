"""Tag field model and the selector that picks fields eligible for repair."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from tagmend.goodness import score

logger = logging.getLogger(__name__)


class Encoding(IntEnum):
    """ID3 text encodings; values match the encoding byte of a frame."""

    LATIN1 = 0
    UTF16 = 1
    UTF16BE = 2
    UTF8 = 3


LEGACY_ENCODING = Encoding.LATIN1


@dataclass(frozen=True)
class TextField:
    name: str
    declared_encoding: Encoding
    text: str | bytes

    def stripped(self) -> str | bytes:
        return self.text.strip()


@dataclass(frozen=True)
class OpaqueFrame:
    """A frame under a supported name that does not carry plain text."""

    name: str
    kind: str


Frame = TextField | OpaqueFrame


def select_fields(frames: Iterable[Frame]) -> dict[str, TextField]:
    """Reduce container frames to one eligible text field per name.

    Rules:
    - non-text frames are dropped;
    - the first non-empty instance of a name wins, later ones only warn;
    - empty (after trimming) values are dropped;
    - only fields declared as the legacy single-byte encoding are kept;
    - fields that already score 1.0 are left alone.
    """
    chosen: dict[str, TextField] = {}
    seen: set[str] = set()
    for frame in frames:
        if isinstance(frame, OpaqueFrame):
            logger.debug(" frame %s is %s, not text; skipping", frame.name, frame.kind)
            continue
        if not frame.stripped():
            logger.debug(" frame %s is empty; skipping", frame.name)
            continue
        if frame.name in seen:
            logger.warning(
                " duplicate frame %s (%r); keeping the first value", frame.name, frame.text
            )
            continue
        seen.add(frame.name)
        if frame.declared_encoding != LEGACY_ENCODING:
            logger.debug(
                " frame %s encoding is %s, not %s; skipping",
                frame.name,
                frame.declared_encoding.name,
                LEGACY_ENCODING.name,
            )
            continue
        if score(frame.stripped()) >= 1.0:
            logger.debug(" frame %s is already normal", frame.name)
            continue
        chosen[frame.name] = frame
    return chosen
