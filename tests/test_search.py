import logging

import pytest

from tagmend.errors import ConfigurationError
from tagmend.fields import Encoding, TextField
from tagmend.goodness import score
from tagmend.search import Candidate, search
from tagmend.transforms import run_all

HELLO = "Привет"


def _latin1(text: str | bytes) -> TextField:
    return TextField("Title", Encoding.LATIN1, text)


def test_round_trip_recovery_yields_single_candidate():
    mangled = HELLO.encode("cp1251").decode("latin-1")
    result = search(_latin1(mangled), threshold=1.0)
    assert result.candidates == [Candidate("single-roundtrip", HELLO, 1.0)]
    assert result.best_score_seen == 1.0
    assert result.searched


def test_surrounding_whitespace_is_trimmed():
    mangled = "  " + HELLO.encode("cp1251").decode("latin-1") + " \n"
    result = search(_latin1(mangled))
    assert [c.result_text for c in result.candidates] == [HELLO]


def test_raw_codepage_bytes_use_direct_pipeline():
    result = search(_latin1(HELLO.encode("cp1251")))
    assert [c.pipeline_name for c in result.candidates] == ["direct"]


def test_clean_or_non_latin1_fields_skip_search():
    skipped = search(_latin1(HELLO))
    assert skipped.candidates == []
    assert not skipped.searched

    mangled = HELLO.encode("cp1251").decode("latin-1")
    other = search(TextField("Title", Encoding.UTF8, mangled))
    assert not other.searched


def test_best_score_is_tracked_below_threshold():
    mangled = "Привет ©".encode("cp1251").decode("latin-1")
    result = search(_latin1(mangled), threshold=1.0)
    assert result.candidates == []
    expected = max(score(v) for v in run_all(mangled).values() if v is not None)
    assert result.best_score_seen == expected == 0.875


def test_threshold_is_inclusive():
    mangled = "Привет ©".encode("cp1251").decode("latin-1")
    result = search(_latin1(mangled), threshold=0.875)
    assert [c.result_text for c in result.candidates] == ["Привет ©"]


def test_lower_threshold_admits_several_candidates():
    mangled = HELLO.encode("cp1251").decode("latin-1")
    result = search(_latin1(mangled), threshold=0.5)
    assert [c.pipeline_name for c in result.candidates] == ["direct", "single-roundtrip"]
    assert all(c.goodness >= 0.5 for c in result.candidates)


@pytest.mark.parametrize("threshold", [0.05, 1.5])
def test_out_of_range_threshold_is_rejected(threshold):
    with pytest.raises(ConfigurationError):
        search(_latin1("Ïðèâåò"), threshold=threshold)


def test_every_dropped_pipeline_is_traced(caplog):
    mangled = "Привет ©".encode("cp1251").decode("latin-1")
    with caplog.at_level(logging.DEBUG, logger="tagmend"):
        result = search(_latin1(mangled), threshold=1.0)
    assert result.candidates == []
    assert "reencode-roundtrip dropped: reencode-roundtrip: encode:cp1251 failed" in caplog.text
    assert "single-roundtrip dropped: goodness 0.8750 below 1.0000" in caplog.text
    assert "direct dropped: goodness 0.6000 below 1.0000" in caplog.text
    assert "mislabel-only dropped: goodness 0.0000 below 1.0000" in caplog.text
