"""
Tests for MutableRecord, the capability descriptor and the partial-update
merger.

Descriptors are built by hand so that the domain is tested without any
ORM. No external dependencies or IO required.
"""

import pytest

from modelview.domain.descriptor import ColumnSpec, ModelDescriptor, model_name
from modelview.domain.entities import MutableRecord
from modelview.domain.errors import RegistrationError, ValidationError
from modelview.domain.merge import merge_partial_update
from modelview.domain.primary_key import KeyKind, PrimaryKeyCodec


def _strict_int(value):
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    return int(value)


class Book:
    """Plain class standing in for a mapped entity."""

    def __init__(self, **values) -> None:
        for key, value in values.items():
            setattr(self, key, value)


def _descriptor(order_by: str = "id") -> ModelDescriptor:
    columns = (
        ColumnSpec("id", int, False, True, 0, _strict_int),
        ColumnSpec("title", str, False, False, "", str),
        ColumnSpec("pages", int, False, False, 0, _strict_int),
    )
    return ModelDescriptor(
        model=Book,
        name=model_name(Book),
        columns=columns,
        primary_key=columns[0],
        order_by=order_by,
        codec=PrimaryKeyCodec(KeyKind.INT64),
        decode_body=dict,
    )


STORED = {"id": 7, "title": "Dune", "pages": 412}


class TestMutableRecord:
    """Tests for the set / not-set builder."""

    def test_seeded_values_are_not_set(self) -> None:
        mutable = MutableRecord.from_record(STORED)

        assert mutable.changes() == {}
        assert mutable.as_record() == STORED

    def test_set_and_unset(self) -> None:
        mutable = MutableRecord(["id", "title"])
        mutable.set("id", 1)
        mutable.set("title", "Emma")
        mutable.unset("id")

        assert mutable.changes() == {"title": "Emma"}
        assert not mutable.is_set("id")
        assert mutable.get("id") == 1

    def test_unknown_column_raises(self) -> None:
        with pytest.raises(KeyError):
            MutableRecord(["id"]).set("title", "x")


class TestModelDescriptor:
    """Tests for descriptor lookups and validation."""

    def test_name_is_lower_cased_trailing_segment(self) -> None:
        assert _descriptor().name == "book"

    def test_lookup_is_exact_and_case_sensitive(self) -> None:
        descriptor = _descriptor()

        assert descriptor.column("title").name == "title"
        assert descriptor.column("Title") is None
        assert descriptor.column_names == ("id", "title", "pages")

    def test_unknown_sort_column_is_rejected(self) -> None:
        with pytest.raises(RegistrationError):
            _descriptor(order_by="author")

    def test_to_record(self) -> None:
        record = _descriptor().to_record(Book(**STORED))

        assert record == STORED


class TestMergePartialUpdate:
    """Tests for merge_partial_update."""

    def test_only_patched_columns_are_set(self) -> None:
        mutable = merge_partial_update(_descriptor(), STORED, {"pages": "500"})

        assert mutable.changes() == {"pages": 500}
        assert mutable.as_record() == {**STORED, "pages": 500}

    def test_unknown_keys_are_ignored(self) -> None:
        mutable = merge_partial_update(_descriptor(), STORED, {"author": "Herbert"})

        assert mutable.changes() == {}

    def test_primary_key_is_never_patched(self) -> None:
        mutable = merge_partial_update(_descriptor(), STORED, {"id": 99})

        assert mutable.changes() == {}
        assert mutable.get("id") == 7

    def test_uncoercible_value_raises(self) -> None:
        with pytest.raises(ValidationError, match="pages"):
            merge_partial_update(_descriptor(), STORED, {"pages": [1]})

    def test_non_object_patch_raises(self) -> None:
        with pytest.raises(ValidationError):
            merge_partial_update(_descriptor(), STORED, ["pages", 1])
