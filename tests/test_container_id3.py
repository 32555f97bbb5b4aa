from pathlib import Path

import pytest
from mutagen.id3 import ID3, TALB, TIT2, TPE1, Encoding

from tagmend.config import RepairConfig
from tagmend.container.id3 import read_frames, write_corrections
from tagmend.errors import ContainerError
from tagmend.fields import Encoding as FieldEncoding
from tagmend.fields import TextField
from tagmend.repair import repair_fields

HELLO = "Привет"
MANGLED = HELLO.encode("cp1251").decode("latin-1")


def _make_mp3(path: Path) -> Path:
    path.write_bytes(b"\xff\xfb\x90\x00" + b"\x00" * 256)
    tags = ID3()
    tags.add(TIT2(encoding=Encoding.LATIN1, text=[MANGLED]))
    tags.add(TPE1(encoding=Encoding.UTF8, text=["Кино"]))
    tags.add(TALB(encoding=Encoding.LATIN1, text=["Best of", "Ïðèâåò"]))
    tags.save(str(path))
    return path


def test_read_frames_maps_encodings_and_values(tmp_path: Path):
    frames = read_frames(_make_mp3(tmp_path / "a.mp3"))
    by_name = {}
    for frame in frames:
        by_name.setdefault(frame.name, []).append(frame)
    assert by_name["Title"] == [TextField("Title", FieldEncoding.LATIN1, MANGLED)]
    assert by_name["Artist"][0].declared_encoding == FieldEncoding.UTF8
    assert [f.text for f in by_name["Album"]] == ["Best of", "Ïðèâåò"]


def test_repair_and_write_back(tmp_path: Path):
    path = _make_mp3(tmp_path / "a.mp3")
    result = repair_fields(read_frames(path), RepairConfig(write=True))
    # Album keeps its first value, which is already clean
    assert list(result.corrections) == ["Title"]
    write_corrections(path, result.corrections)

    tags = ID3(str(path))
    assert tags["TIT2"].text == [HELLO]
    assert tags["TIT2"].encoding == Encoding.UTF8
    assert tags["TPE1"].text == ["Кино"]
    assert tags["TALB"].text == ["Best of", "Ïðèâåò"]


def test_missing_file_raises_container_error(tmp_path: Path):
    with pytest.raises(ContainerError):
        read_frames(tmp_path / "missing.mp3")


def test_file_without_tag_raises_container_error(tmp_path: Path):
    path = tmp_path / "plain.mp3"
    path.write_bytes(b"\x00" * 64)
    with pytest.raises(ContainerError):
        read_frames(path)
