from tagmend.policy import Accepted, Ambiguous, NoChange, Unconvertible, resolve
from tagmend.search import Candidate


def test_not_searched_is_no_change():
    assert resolve([], 1.0, searched=False) == NoChange()


def test_no_candidates_is_unconvertible_with_best_score():
    outcome = resolve([], 0.42)
    assert outcome == Unconvertible(0.42)
    assert outcome.kind == "unconvertible"


def test_single_candidate_is_accepted():
    outcome = resolve([Candidate("single-roundtrip", "Кино", 1.0)], 1.0)
    assert outcome == Accepted("Кино", "single-roundtrip")


def test_several_candidates_are_ambiguous():
    candidates = [
        Candidate("direct", "ГЏГ°", 0.6),
        Candidate("single-roundtrip", "Привет", 1.0),
        Candidate("mislabel-only", "Привет", 1.0),
    ]
    outcome = resolve(candidates, 1.0)
    assert isinstance(outcome, Ambiguous)
    assert outcome.candidate_texts == ("ГЏГ°", "Привет", "Привет")
    assert outcome.pipeline_names == ("direct", "single-roundtrip", "mislabel-only")
    # inputs are left as they were
    assert len(candidates) == 3


def test_resolution_ignores_candidate_order():
    a = Candidate("direct", "A", 1.0)
    b = Candidate("mislabel-only", "B", 1.0)
    assert isinstance(resolve([a, b], 1.0), Ambiguous)
    assert isinstance(resolve([b, a], 1.0), Ambiguous)
