"""
Domain entities for the model-to-REST adapter.

Records are plain mappings of column name to native value, produced by the
storage layer. MutableRecord is the per-request builder used to describe
inserts and updates.
"""

from typing import Any, Iterable, Mapping

Record = dict[str, Any]


class MutableRecord:
    """Transient builder tracking, per column, "set" versus "not set".

    Columns that are "not set" carry their current value forward and are
    excluded from write commands.
    """

    def __init__(self, columns: Iterable[str]) -> None:
        self._values: dict[str, Any] = {name: None for name in columns}
        self._set: set[str] = set()

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "MutableRecord":
        """Seed a builder from stored values, all marked "not set"."""
        mutable = cls(record.keys())
        mutable._values.update(record)
        return mutable

    def set(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise KeyError(name)
        self._values[name] = value
        self._set.add(name)

    def unset(self, name: str) -> None:
        if name not in self._values:
            raise KeyError(name)
        self._set.discard(name)

    def is_set(self, name: str) -> bool:
        return name in self._set

    def get(self, name: str) -> Any:
        return self._values[name]

    def changes(self) -> dict[str, Any]:
        """Return only the columns marked "set", in column order."""
        return {name: value for name, value in self._values.items() if name in self._set}

    def as_record(self) -> Record:
        return dict(self._values)

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{name}={'Set' if name in self._set else 'NotSet'}({value!r})"
            for name, value in self._values.items()
        )
        return f"MutableRecord({fields})"
