"""
Capability descriptor.

Describes everything the CRUD dispatcher needs to know about one entity
type: its name tag, its closed column set with name lookup, its single
primary key column and codec, and the default sort column used by List.
Descriptors are built once per entity type at registration time.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from modelview.domain.entities import Record
from modelview.domain.errors import RegistrationError
from modelview.domain.primary_key import PrimaryKeyCodec


@dataclass(frozen=True)
class ColumnSpec:
    """One member of an entity's closed column set.

    Attributes:
        name: Attribute name used in JSON bodies and records.
        python_type: Native Python type of the column.
        nullable: Whether None is a legal value.
        primary_key: Whether this column is the primary key.
        zero: Default value used when a full-update body omits the column.
        coerce: Converts a JSON-typed value into the native type.
    """

    name: str
    python_type: type
    nullable: bool
    primary_key: bool
    zero: Any
    coerce: Callable[[Any], Any] = field(compare=False, repr=False)


def model_name(model: type) -> str:
    """Return the lower-cased trailing segment of a type's dotted path."""
    path = f"{model.__module__}.{model.__qualname__}".lower()
    return path.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class ModelDescriptor:
    """Capability descriptor for one entity type.

    Attributes:
        model: The mapped class rows are loaded into.
        name: Name tag used in logs and route tags.
        columns: Ordered, closed column set.
        primary_key: The single primary key column.
        order_by: Name of the default sort column for List.
        codec: Converts wire identifiers into native keys.
        decode_body: Decodes a full Record-shaped body into native values,
            filling omitted columns with their zero value.
    """

    model: type
    name: str
    columns: tuple[ColumnSpec, ...]
    primary_key: ColumnSpec
    order_by: str
    codec: PrimaryKeyCodec
    decode_body: Callable[[Any], Record] = field(compare=False, repr=False)
    _lookup: Mapping[str, ColumnSpec] = field(
        init=False, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        lookup = {column.name: column for column in self.columns}
        if self.primary_key.name not in lookup:
            raise RegistrationError(
                f"[{self.name}] primary key {self.primary_key.name!r} is not a column"
            )
        if self.order_by not in lookup:
            raise RegistrationError(
                f"[{self.name}] unknown default sort column {self.order_by!r}"
            )
        object.__setattr__(self, "_lookup", lookup)

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def column(self, name: str) -> Optional[ColumnSpec]:
        """Exact, case-sensitive column lookup. None for unknown names."""
        return self._lookup.get(name)

    def to_record(self, instance: Any) -> Record:
        """Read every column of a loaded instance into a Record."""
        return {column.name: getattr(instance, column.name) for column in self.columns}
