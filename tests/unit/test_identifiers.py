"""Unit tests for identifier classification and generation."""

import pytest

from sms_threads.identifiers import (
    DraftId,
    ThreadId,
    classify_id,
    draft_key,
    generate_draft_id,
    id_from_hash,
    is_numeric_id,
    to_numeric_id,
)


class TestClassification:
    """Test suite for numeric / non-numeric classification."""

    @pytest.mark.parametrize("raw", [42, "42", " 42 ", 4.0, "1e3", "0x1f", "", -7])
    def test_numeric(self, raw) -> None:
        assert is_numeric_id(raw) is True

    @pytest.mark.parametrize("raw", ["d1a2b3", "abc", "nan", "inf", None, True, float("inf")])
    def test_non_numeric(self, raw) -> None:
        assert is_numeric_id(raw) is False

    def test_classify_numeric_string(self) -> None:
        assert classify_id("42") == ThreadId(42)
        assert classify_id(42.0) == ThreadId(42)

    def test_classify_draft(self) -> None:
        assert classify_id("d1a2b3") == DraftId("d1a2b3")

    def test_classify_passes_tagged_ids_through(self) -> None:
        tagged = DraftId("dxyz")
        assert classify_id(tagged) is tagged

    def test_to_numeric_id(self) -> None:
        assert to_numeric_id("77") == 77
        assert to_numeric_id("2.5") == 2.5
        with pytest.raises(ValueError):
            to_numeric_id("d123")

    def test_draft_key_normalizes_numbers(self) -> None:
        assert draft_key(42) == "42"
        assert draft_key(42.0) == "42"
        assert draft_key("42") == "42"
        assert draft_key(ThreadId(42)) == "42"


class TestGenerateDraftId:
    """Test suite for draft id generation."""

    def test_layout(self) -> None:
        draft_id = generate_draft_id(now_ms=36**3 + 35, rand=lambda: 0.5)

        assert draft_id == "d" + "00z" + "i0000000"

    def test_fixed_length_and_prefix(self) -> None:
        draft_id = generate_draft_id()

        assert draft_id.startswith("d")
        assert len(draft_id) == 12

    def test_never_numeric(self) -> None:
        for _ in range(1000):
            assert not is_numeric_id(generate_draft_id())

    def test_unique_across_rapid_calls(self) -> None:
        ids = {generate_draft_id() for _ in range(10_000)}
        assert len(ids) == 10_000


class TestIdFromHash:
    """Test suite for hash fragment parsing."""

    def test_extracts_thread_id(self) -> None:
        assert id_from_hash("#main?thread=77") == "77"

    def test_extracts_draft_id_and_trims(self) -> None:
        assert id_from_hash("#thread=dabc12345678 ") == "dabc12345678"

    def test_no_match(self) -> None:
        assert not id_from_hash("#main")
        assert not id_from_hash("")
        assert not id_from_hash(None)
