"""Pure helpers and validators"""
from types import SimpleNamespace

import pytest

from legal_vault.utils.exceptions import ValidationError
from legal_vault.utils.helpers import (
    apply_partial_update,
    dedupe,
    format_fee_range,
    mask_email,
    normalize_viewer_ids,
)
from legal_vault.utils.validators import validate_fee_range, validate_phone


def test_dedupe_keeps_first_seen_order():
    assert dedupe(["b.pdf", "a.pdf", "b.pdf", None, " ", "c.pdf"]) == ["b.pdf", "a.pdf", "c.pdf"]
    assert dedupe(None) == []


def test_normalize_viewer_ids():
    assert normalize_viewer_ids([3, "3", 4]) == [3, 4]
    assert normalize_viewer_ids([]) is None
    assert normalize_viewer_ids(None) is None
    with pytest.raises(ValidationError):
        normalize_viewer_ids(["x"])


def test_apply_partial_update():
    row = SimpleNamespace(name="Brief", tag="urgent", note="keep")

    changed = apply_partial_update(row, {"tag": None, "note": "keep"}, required=("name",))

    assert changed == ["tag"]
    assert row.tag is None
    assert row.note == "keep"
    with pytest.raises(ValidationError):
        apply_partial_update(row, {"name": None}, required=("name",))


def test_fee_range():
    assert validate_fee_range({"min": "1000", "max": 5000}) == (1000.0, 5000.0)
    assert format_fee_range(1000, 5000) == "₱1,000 - ₱5,000"
    assert format_fee_range(999.5, 1500) == "₱999.50 - ₱1,500"


def test_misc():
    assert mask_email("juan.delacruz@example.com") == "ju***@example.com"
    assert validate_phone("0917-123-4567")
    assert not validate_phone("call me")
