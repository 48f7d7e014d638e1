"""
Tests for building descriptors from SQLAlchemy mapped classes.

Only mapper metadata is inspected; no database connection is opened.
"""

import uuid
from datetime import datetime
from typing import Optional

import pytest
from sqlalchemy import Float, ForeignKey, SmallInteger, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from modelview.demo.entities import Student
from modelview.domain.errors import RegistrationError, ValidationError
from modelview.domain.primary_key import KeyKind
from modelview.infrastructure.introspection import describe_model


class Base(DeclarativeBase):
    pass


class Enrollment(Base):
    __tablename__ = "enrollment"

    student_id: Mapped[int] = mapped_column(primary_key=True)
    course_id: Mapped[int] = mapped_column(primary_key=True)
    grade: Mapped[Optional[str]]


class Tag(Base):
    __tablename__ = "tag"

    code: Mapped[int] = mapped_column(SmallInteger, primary_key=True)
    label: Mapped[str] = mapped_column(String(40))


class Document(Base):
    __tablename__ = "document"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True)
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("document.id"))


class Measurement(Base):
    __tablename__ = "measurement"

    value: Mapped[float] = mapped_column(Float, primary_key=True)


class NotMapped:
    pass


class TestDescribeModel:
    """Tests for describe_model."""

    def test_student_columns(self) -> None:
        descriptor = describe_model(Student, "id")

        assert descriptor.name == "student"
        assert descriptor.column_names == (
            "id", "name", "region", "age", "create_time", "score", "gender",
        )
        assert descriptor.primary_key.name == "id"
        assert descriptor.codec.kind is KeyKind.INT64

    @pytest.mark.parametrize(
        ("model", "kind"),
        [(Tag, KeyKind.INT16), (Enrollment, KeyKind.INT32), (Document, KeyKind.UUID)],
    )
    def test_key_kinds(self, model: type, kind: KeyKind) -> None:
        order_by = [column.key for column in model.__table__.primary_key][0]

        descriptor = describe_model(model, order_by, allow_composite_key=True)

        assert descriptor.codec.kind is kind

    def test_composite_key_is_rejected_by_default(self) -> None:
        with pytest.raises(RegistrationError, match="composite"):
            describe_model(Enrollment, "student_id")

    def test_composite_key_uses_first_column_when_allowed(self) -> None:
        descriptor = describe_model(Enrollment, "grade", allow_composite_key=True)

        assert descriptor.primary_key.name == "student_id"
        assert not descriptor.column("course_id").primary_key

    def test_unsupported_key_type(self) -> None:
        with pytest.raises(RegistrationError, match="unsupported primary key"):
            describe_model(Measurement, "value")

    def test_unknown_sort_column(self) -> None:
        with pytest.raises(RegistrationError):
            describe_model(Student, "birthday")

    def test_unmapped_class(self) -> None:
        with pytest.raises(RegistrationError, match="not a mapped class"):
            describe_model(NotMapped, "id")


class TestZeroValuesAndCoercion:
    """Tests for the per-column defaults and value converters."""

    def test_zero_values(self) -> None:
        descriptor = describe_model(Student, "id")

        zeros = {column.name: column.zero for column in descriptor.columns}
        assert zeros["name"] == ""
        assert zeros["age"] == 0
        assert zeros["score"] == 0.0
        assert zeros["gender"] is False
        assert zeros["create_time"] == datetime(1970, 1, 1)

    def test_nullable_zero_is_none(self) -> None:
        descriptor = describe_model(Document, "id")

        assert descriptor.column("parent_id").zero is None
        assert descriptor.column("parent_id").coerce(None) is None

    def test_coerce(self) -> None:
        descriptor = describe_model(Student, "id")

        assert descriptor.column("age").coerce("21") == 21
        assert descriptor.column("create_time").coerce("2024-05-06T07:08:09") == datetime(
            2024, 5, 6, 7, 8, 9
        )
        with pytest.raises(ValueError):
            descriptor.column("age").coerce("old")


class TestDecodeBody:
    """Tests for decoding full Record-shaped bodies."""

    def test_omitted_fields_take_zero_values(self) -> None:
        descriptor = describe_model(Student, "id")

        values = descriptor.decode_body({"name": "Ada"})

        assert values == {
            "id": None,
            "name": "Ada",
            "region": "",
            "age": 0,
            "create_time": datetime(1970, 1, 1),
            "score": 0.0,
            "gender": False,
        }

    def test_extra_keys_are_ignored(self) -> None:
        descriptor = describe_model(Student, "id")

        values = descriptor.decode_body({"name": "Ada", "nickname": "A"})

        assert "nickname" not in values

    def test_invalid_values_raise(self) -> None:
        descriptor = describe_model(Student, "id")

        with pytest.raises(ValidationError, match="age"):
            descriptor.decode_body({"age": "test"})

    def test_non_object_body_raises(self) -> None:
        descriptor = describe_model(Student, "id")

        with pytest.raises(ValidationError, match="JSON object"):
            descriptor.decode_body("student")
