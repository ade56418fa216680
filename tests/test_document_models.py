"""Tests for the hidden-thread document models."""

import json

import pytest
from pydantic import ValidationError

from hidesync.core.document import (
    DOCUMENT_VERSION,
    UNKNOWN_BOARD,
    Document,
    SiteState,
    ThreadRef,
)
from hidesync.core.exceptions import DocumentParseError, HideSyncError


class TestThreadRef:
    """Tests for ThreadRef."""

    def test_identity_is_thread_and_board(self) -> None:
        ref = ThreadRef(thread_id="123", board_id="b")
        assert ref.identity == ("123", "b")

    def test_same_thread_on_two_boards_differs(self) -> None:
        """Test that the board is part of the identity."""
        assert ThreadRef(thread_id="1", board_id="b").identity != ThreadRef(
            thread_id="1", board_id="a"
        ).identity

    def test_missing_board_defaults_to_unknown(self) -> None:
        assert ThreadRef(thread_id="7").board_id == UNKNOWN_BOARD

    def test_numeric_ids_are_coerced(self) -> None:
        """Test that numeric ids from hand-edited gists are accepted."""
        ref = ThreadRef.model_validate({"thread_id": 42, "board_id": 7})
        assert ref.thread_id == "42"
        assert ref.board_id == "7"

    def test_empty_thread_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ThreadRef(thread_id="", board_id="b")

    def test_missing_thread_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ThreadRef.model_validate({"board_id": "b"})

    def test_is_frozen(self) -> None:
        ref = ThreadRef(thread_id="1", board_id="b")
        with pytest.raises(ValidationError):
            ref.thread_id = "2"  # type: ignore[misc]


class TestSiteState:
    """Tests for SiteState helpers."""

    def test_contains_matches_identity(self) -> None:
        site = SiteState(threads=[ThreadRef(thread_id="1", board_id="b")])
        assert site.contains(ThreadRef(thread_id="1", board_id="b"))
        assert not site.contains(ThreadRef(thread_id="1", board_id="a"))

    def test_count_for_board(self) -> None:
        site = SiteState(
            threads=[
                ThreadRef(thread_id="1", board_id="b"),
                ThreadRef(thread_id="2", board_id="b"),
                ThreadRef(thread_id="3", board_id="a"),
            ]
        )
        assert site.count_for_board("b") == 2
        assert site.count_for_board("a") == 1
        assert site.count_for_board("x") == 0


class TestDocument:
    """Tests for Document serialization."""

    def test_empty_has_one_profile(self) -> None:
        doc = Document.empty()
        assert doc.version == DOCUMENT_VERSION
        assert list(doc.profiles) == ["default"]
        assert doc.profiles["default"].sites == {}

    def test_empty_with_custom_profile(self) -> None:
        assert list(Document.empty("work").profiles) == ["work"]

    def test_to_json_shape(self) -> None:
        """Test the wire format uses snake_case keys and 2-space indent."""
        doc = Document.empty()
        doc.profiles["default"].sites["example.test"] = SiteState(
            threads=[ThreadRef(thread_id="123", board_id="b")]
        )

        text = doc.to_json()
        data = json.loads(text)

        assert data["version"] == 1
        profile = data["profiles"]["default"]
        assert "last_updated" in profile
        assert profile["sites"]["example.test"]["threads"] == [
            {"thread_id": "123", "board_id": "b"}
        ]
        assert '\n  "version": 1' in text

    def test_from_json_roundtrip_is_stable(self) -> None:
        doc = Document.empty()
        doc.profiles["default"].sites["example.test"] = SiteState(
            threads=[ThreadRef(thread_id="1", board_id="b")]
        )
        text = doc.to_json()
        assert Document.from_json(text).to_json() == text

    def test_from_json_rejects_malformed_text(self) -> None:
        with pytest.raises(DocumentParseError, match="Invalid JSON in gist"):
            Document.from_json("{not json")

    def test_from_json_rejects_wrong_shape(self) -> None:
        """Test that valid JSON with the wrong structure is a parse error too."""
        with pytest.raises(DocumentParseError):
            Document.from_json('{"profiles": {"default": {"sites": {"x": {"threads": [{}]}}}}}')

    def test_parse_error_is_hide_sync_error(self) -> None:
        with pytest.raises(HideSyncError):
            Document.from_json("[]")
