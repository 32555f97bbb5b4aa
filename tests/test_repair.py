import logging

from tagmend.config import RepairConfig
from tagmend.fields import Encoding, OpaqueFrame, TextField
from tagmend.policy import Accepted, Ambiguous, Unconvertible
from tagmend.repair import repair_fields

HELLO = "Привет"
MANGLED = HELLO.encode("cp1251").decode("latin-1")


def test_accepted_field_becomes_utf8_correction():
    frames = [
        TextField("Title", Encoding.LATIN1, MANGLED),
        TextField("Artist", Encoding.LATIN1, "Kino"),
        OpaqueFrame("Album", "APIC"),
    ]
    result = repair_fields(frames, RepairConfig())
    assert result.corrections == {"Title": TextField("Title", Encoding.UTF8, HELLO)}
    assert [r.name for r in result.reports] == ["Title"]
    assert result.reports[0].outcome == Accepted(HELLO, "single-roundtrip")


def test_clean_field_has_no_correction():
    result = repair_fields([TextField("Title", Encoding.LATIN1, HELLO)], RepairConfig())
    assert result.corrections == {}
    assert result.reports == []


def test_ambiguous_field_is_not_corrected(caplog):
    frames = [TextField("Title", Encoding.LATIN1, MANGLED)]
    with caplog.at_level(logging.WARNING, logger="tagmend"):
        result = repair_fields(frames, RepairConfig(threshold=0.5))
    outcome = result.reports[0].outcome
    assert isinstance(outcome, Ambiguous)
    assert len(outcome.candidate_texts) == 2
    assert outcome.candidate_texts[1] == HELLO
    assert outcome.candidate_texts[0] != HELLO
    assert result.corrections == {}
    assert "ambiguous conversion for frame Title, two possible results" in caplog.text


def test_unconvertible_field_reports_best_score(caplog):
    mangled = "Привет ©".encode("cp1251").decode("latin-1")
    with caplog.at_level(logging.WARNING, logger="tagmend"):
        result = repair_fields([TextField("Album", Encoding.LATIN1, mangled)], RepairConfig())
    assert result.reports[0].outcome == Unconvertible(0.875)
    assert result.corrections == {}
    assert "best goodness 0.8750" in caplog.text


def test_custom_codepage_pair():
    mangled = HELLO.encode("koi8-r").decode("cp1252")
    frames = [TextField("Title", Encoding.LATIN1, mangled)]
    config = RepairConfig(source_codepage="koi8-r", mislabel_codepage="cp1252")
    result = repair_fields(frames, config)
    assert result.corrections["Title"].text == HELLO
