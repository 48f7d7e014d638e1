"""
Partial-update merger.

Merges a sparse field-name/value mapping into an existing record. Names are
resolved against the descriptor's precomputed lookup table; names that match
no column are ignored.
"""

import logging
from typing import Any, Mapping

from modelview.domain.descriptor import ModelDescriptor
from modelview.domain.entities import MutableRecord
from modelview.domain.errors import ValidationError

logger = logging.getLogger(__name__)


def merge_partial_update(
    descriptor: ModelDescriptor,
    record: Mapping[str, Any],
    patch: Any,
) -> MutableRecord:
    """Apply a sparse patch to an existing record.

    Args:
        descriptor: Descriptor of the entity type.
        record: Currently stored values.
        patch: Decoded JSON body; must be an object.

    Returns:
        A MutableRecord seeded from ``record`` where only the patched
        columns are marked "set".

    Raises:
        ValidationError: If the patch is not an object or a value cannot be
            coerced to its column's type.
    """
    if not isinstance(patch, Mapping):
        raise ValidationError(
            f"partial update body must be a JSON object, got {type(patch).__name__}"
        )

    mutable = MutableRecord.from_record(record)
    for key, value in patch.items():
        column = descriptor.column(key)
        if column is None:
            logger.debug("[%s] http patch: ignore unknown field %r", descriptor.name, key)
            continue
        if column.primary_key:
            logger.debug("[%s] http patch: ignore primary key field %r", descriptor.name, key)
            continue
        try:
            coerced = column.coerce(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"invalid value for field {key!r}: {exc}") from exc
        logger.debug("[%s] http patch set %s: %r", descriptor.name, key, coerced)
        mutable.set(key, coerced)
    return mutable
