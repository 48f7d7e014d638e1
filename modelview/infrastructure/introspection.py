"""
Adapter: SQLAlchemy model introspection.

Builds a ModelDescriptor from a SQLAlchemy declarative class. Runs once per
entity type at registration; the column lookup table, value coercers and
body schema are all precomputed here.
"""

import logging
import uuid
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Optional

from pydantic import ConfigDict, TypeAdapter, create_model
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import BigInteger, Integer, SmallInteger, String, Uuid, inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.sql.schema import Column

from modelview.domain.descriptor import ColumnSpec, ModelDescriptor, model_name
from modelview.domain.entities import Record
from modelview.domain.errors import RegistrationError, ValidationError
from modelview.domain.primary_key import KeyKind, PrimaryKeyCodec

logger = logging.getLogger(__name__)

_ZERO_VALUES: dict[type, Any] = {
    str: "",
    int: 0,
    float: 0.0,
    bool: False,
    Decimal: Decimal(0),
    bytes: b"",
    datetime: datetime(1970, 1, 1),
    date: date(1970, 1, 1),
    time: time(0, 0),
    timedelta: timedelta(0),
    uuid.UUID: uuid.UUID(int=0),
}


def _python_type(column: Column) -> type:
    try:
        return column.type.python_type
    except NotImplementedError:
        return object


def _zero_value(python_type: type, nullable: bool) -> Any:
    if nullable:
        return None
    return _ZERO_VALUES.get(python_type)


def _key_kind(column: Column) -> KeyKind:
    # BigInteger and SmallInteger subclass Integer, so test them first.
    column_type = column.type
    if isinstance(column_type, BigInteger):
        return KeyKind.INT64
    if isinstance(column_type, SmallInteger):
        return KeyKind.INT16
    if isinstance(column_type, Integer):
        return KeyKind.INT32
    if isinstance(column_type, String):
        return KeyKind.STRING
    if isinstance(column_type, Uuid):
        return KeyKind.UUID
    raise RegistrationError(
        f"unsupported primary key type {column_type!r} on column {column.key!r}"
    )


def _build_coercer(python_type: type, nullable: bool):
    annotation = Optional[python_type] if nullable else python_type
    if python_type is object:
        return lambda value: value
    return TypeAdapter(annotation).validate_python


def _build_body_decoder(name: str, columns: tuple[ColumnSpec, ...]):
    fields: dict[str, Any] = {}
    for column in columns:
        annotation = Any if column.python_type is object else column.python_type
        if column.nullable or column.primary_key:
            annotation = Optional[annotation]
        default = None if column.primary_key else column.zero
        fields[column.name] = (annotation, default)

    schema = create_model(
        f"{name.title()}Body",
        __config__=ConfigDict(extra="ignore"),
        **fields,
    )

    def decode_body(body: Any) -> Record:
        if not isinstance(body, dict):
            raise ValidationError(
                f"request body must be a JSON object, got {type(body).__name__}"
            )
        try:
            return schema.model_validate(body).model_dump()
        except PydanticValidationError as exc:
            raise ValidationError(f"invalid request body: {exc}") from exc

    return decode_body


def describe_model(
    model: type,
    order_by: str,
    allow_composite_key: bool = False,
) -> ModelDescriptor:
    """Build the capability descriptor for a SQLAlchemy mapped class.

    Args:
        model: Declarative mapped class.
        order_by: Attribute name of the default sort column for List.
        allow_composite_key: Use the first declared key column of a composite
            primary key instead of rejecting the model.

    Returns:
        The descriptor, built once and shared by every request.

    Raises:
        RegistrationError: If the class is not mapped, has an unsupported or
            composite primary key, or ``order_by`` names no column.
    """
    name = model_name(model)
    try:
        mapper = inspect(model)
    except NoInspectionAvailable as exc:
        raise RegistrationError(f"{model!r} is not a mapped class") from exc

    key_columns = mapper.primary_key
    if len(key_columns) > 1:
        if not allow_composite_key:
            raise RegistrationError(
                f"[{name}] composite primary keys are not supported: "
                f"{[column.key for column in key_columns]}"
            )
        logger.warning(
            "[%s] composite primary key, only %r is used", name, key_columns[0].key
        )
    key_column = key_columns[0]

    columns: list[ColumnSpec] = []
    primary_key: Optional[ColumnSpec] = None
    for attribute in mapper.column_attrs:
        column = attribute.columns[0]
        python_type = _python_type(column)
        nullable = bool(column.nullable) and column is not key_column
        spec = ColumnSpec(
            name=attribute.key,
            python_type=python_type,
            nullable=nullable,
            primary_key=column is key_column,
            zero=_zero_value(python_type, nullable),
            coerce=_build_coercer(python_type, nullable),
        )
        columns.append(spec)
        if spec.primary_key:
            primary_key = spec

    if primary_key is None:
        raise RegistrationError(f"[{name}] primary key column is not mapped")

    frozen = tuple(columns)
    descriptor = ModelDescriptor(
        model=model,
        name=name,
        columns=frozen,
        primary_key=primary_key,
        order_by=order_by,
        codec=PrimaryKeyCodec(_key_kind(key_column)),
        decode_body=_build_body_decoder(name, frozen),
    )
    logger.info(
        "[%s] registered model with columns %s, primary key %r, order by %r",
        name,
        ", ".join(descriptor.column_names),
        primary_key.name,
        order_by,
    )
    return descriptor
