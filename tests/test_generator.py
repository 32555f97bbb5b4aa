import pytest

from tagmend.config import RepairConfig
from tagmend.data.generator import CHAINS, PHRASES, generate_synthetic_fields, mangle
from tagmend.fields import Encoding, TextField
from tagmend.policy import Accepted
from tagmend.repair import repair_field


def test_mangle_single_roundtrip_matches_latin1_reading():
    assert mangle("Привет", "single-roundtrip") == "Ïðèâåò"


def test_mangle_rejects_unknown_chain():
    with pytest.raises(ValueError):
        mangle("Привет", "rot13")


@pytest.mark.parametrize("chain", CHAINS)
def test_every_chain_is_recovered_by_its_pipeline(chain):
    config = RepairConfig()
    for phrase in PHRASES:
        field = TextField("Title", Encoding.LATIN1, mangle(phrase, chain))
        outcome = repair_field(field, config)
        assert outcome == Accepted(phrase, chain), phrase


def test_generate_fields_is_deterministic():
    first = generate_synthetic_fields(count=6, seed=3)
    second = generate_synthetic_fields(count=6, seed=3)
    assert [s.field for s in first] == [s.field for s in second]
    assert len(first) == 6
    assert all(s.field.declared_encoding == Encoding.LATIN1 for s in first)
    assert all(s.chain in CHAINS for s in first)
