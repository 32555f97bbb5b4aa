"""Read and write ID3v2 text frames with mutagen.

This is the only place that touches files; everything upstream works on
``TextField``/``OpaqueFrame`` values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from mutagen import MutagenError
from mutagen.id3 import ID3, Frames, ID3NoHeaderError, TextFrame
from mutagen.id3 import Encoding as ID3Encoding

from tagmend.config import SUPPORTED_TAGS
from tagmend.errors import ContainerError
from tagmend.fields import Encoding, Frame, OpaqueFrame, TextField

logger = logging.getLogger(__name__)


def open_tag(path: Path) -> ID3:
    if not path.is_file():
        raise ContainerError(f"File not found: {path}")
    try:
        return ID3(str(path))
    except ID3NoHeaderError as exc:
        raise ContainerError(f"No ID3v2 tag in {path}") from exc
    except (MutagenError, OSError) as exc:
        raise ContainerError(f"Could not read tag from {path}: {exc}") from exc


def frames_from_tag(tag: ID3, tags: Mapping[str, str] = SUPPORTED_TAGS) -> list[Frame]:
    """Extract supported frames; multi-value frames yield one field per value."""
    out: list[Frame] = []
    for name, frame_id in tags.items():
        for frame in tag.getall(frame_id):
            if not isinstance(frame, TextFrame):
                out.append(OpaqueFrame(name, type(frame).__name__))
                continue
            encoding = Encoding(int(frame.encoding))
            for value in frame.text:
                logger.debug(" tag %s found, encoding %s, text: %r", name, encoding.name, value)
                out.append(TextField(name, encoding, str(value)))
    return out


def read_frames(path: Path, tags: Mapping[str, str] = SUPPORTED_TAGS) -> list[Frame]:
    return frames_from_tag(open_tag(path), tags)


def write_corrections(
    path: Path, corrections: Mapping[str, TextField], tags: Mapping[str, str] = SUPPORTED_TAGS
) -> None:
    """Replace each corrected frame with a UTF-8 frame and save the tag."""
    tag = open_tag(path)
    for name, field in corrections.items():
        frame_id = tags[name]
        frame_cls = Frames[frame_id]
        tag.setall(frame_id, [frame_cls(encoding=ID3Encoding.UTF8, text=[field.text])])
    try:
        tag.save(str(path))
    except (MutagenError, OSError) as exc:
        raise ContainerError(f"Could not save tag to {path}: {exc}") from exc
