"""
Primary key codec.

Converts the wire-level unsigned 64-bit identifier taken from the request
path into the native primary key value of an entity. The conversion is
either lossless or it fails with KeyConversionError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union
from uuid import UUID

from modelview.domain.errors import KeyConversionError

WIRE_MAX = 2**64 - 1

NativeKey = Union[int, str, UUID]


class KeyKind(Enum):
    """Native representation of a primary key column."""

    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    STRING = "string"
    UUID = "uuid"


_SIGNED_BITS = {
    KeyKind.INT16: 16,
    KeyKind.INT32: 32,
    KeyKind.INT64: 64,
}


@dataclass(frozen=True)
class PrimaryKeyCodec:
    """Decodes wire identifiers for one key kind."""

    kind: KeyKind

    def decode(self, identifier: int) -> NativeKey:
        """Return the native key for a wire identifier.

        Args:
            identifier: Unsigned 64-bit identifier from the request path.

        Returns:
            The key in the entity's native representation.

        Raises:
            KeyConversionError: If the identifier is outside the wire domain
                or the native kind cannot represent it.
        """
        if isinstance(identifier, bool) or not isinstance(identifier, int):
            raise KeyConversionError(identifier, "identifier must be an integer")
        if identifier < 0 or identifier > WIRE_MAX:
            raise KeyConversionError(identifier, "outside the unsigned 64-bit range")

        if self.kind in _SIGNED_BITS:
            upper = 2 ** (_SIGNED_BITS[self.kind] - 1) - 1
            if identifier > upper:
                raise KeyConversionError(
                    identifier, f"{self.kind.value} keys are at most {upper}"
                )
            return identifier
        if self.kind is KeyKind.STRING:
            return str(identifier)
        return UUID(int=identifier)
