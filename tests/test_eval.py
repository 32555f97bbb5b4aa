from tagmend.data.generator import SyntheticField, mangle
from tagmend.eval.harness import evaluate_fields, evaluate_synthetic
from tagmend.fields import Encoding, TextField


def test_evaluate_synthetic_produces_summary():
    payload = evaluate_synthetic(count=12, seed=42)
    summary = payload["evaluation"]
    assert summary.fields == 12
    assert summary.recovered == 12
    assert summary.wrong == 0
    assert summary.recovery_rate == 1.0
    assert summary.outcome_counts == {"accepted": 12}
    assert payload["generator"]["seed"] == 42
    assert len(summary.samples) == 3


def test_low_threshold_surfaces_ambiguity():
    payload = evaluate_synthetic(count=12, seed=42, threshold=0.1, chains=("single-roundtrip",))
    summary = payload["evaluation"]
    assert summary.ambiguous > 0
    assert summary.recovered + summary.ambiguous == 12


def test_raw_bytes_samples_are_shown_as_hex():
    raw = mangle("Привет", "direct")
    sample = SyntheticField(TextField("Title", Encoding.LATIN1, raw), "Привет", "direct")
    summary = evaluate_fields([sample])
    assert summary.recovered == 1
    shown = summary.samples[0].mangled
    assert "cf f0 e8 e2 e5 f2" in shown
    assert "\ufffd" not in shown
