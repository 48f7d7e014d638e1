"""
Pagination resolver.

Extracts and normalizes page-size / page-number parameters from the raw
request query. Each parameter is described by one PageParam value and
resolved by the single generic resolve_param function.
"""

import logging
import re
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

_UNSIGNED = re.compile(r"\+?[0-9]+")
_UNSIGNED_MAX = 2**64 - 1


@dataclass(frozen=True)
class PageParam:
    """Configuration for one pagination query parameter.

    Attributes:
        name: Query parameter name.
        default: Value used when the parameter is absent or malformed.
        offset_adjustment: Subtracted when the value is at least this large.
    """

    name: str
    default: int
    offset_adjustment: int = 0


PAGE_SIZE = PageParam(name="page_size", default=20)
PAGE_NUMBER = PageParam(name="page_num", default=0, offset_adjustment=1)


@dataclass(frozen=True)
class PageRequest:
    """Normalized pagination request. ``size == 0`` means unpaginated."""

    size: int
    number: int

    @property
    def unpaginated(self) -> bool:
        return self.size == 0

    @property
    def offset(self) -> int:
        return self.size * self.number


def _parse_unsigned(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if 0 <= raw <= _UNSIGNED_MAX else None
    if not isinstance(raw, str) or not _UNSIGNED.fullmatch(raw):
        return None
    value = int(raw)
    return value if value <= _UNSIGNED_MAX else None


def resolve_param(query: Mapping[str, object], param: PageParam) -> int:
    """Resolve one pagination parameter from the query.

    Args:
        query: Raw query parameters.
        param: The parameter description.

    Returns:
        The parsed value, or the default, minus the offset adjustment
        when the value is at least as large as the adjustment.
    """
    value = _parse_unsigned(query.get(param.name))
    if value is None:
        value = param.default
    if param.offset_adjustment and value >= param.offset_adjustment:
        value -= param.offset_adjustment
    logger.debug("params for %s is %d", param.name, value)
    return value


def resolve_page(
    query: Mapping[str, object], default_size: int = PAGE_SIZE.default
) -> PageRequest:
    """Build a PageRequest from raw query parameters.

    ``page_num`` of 0 and 1 both resolve to page 0, 2 resolves to page 1,
    and so on.
    """
    size_param = PageParam(PAGE_SIZE.name, default_size, PAGE_SIZE.offset_adjustment)
    return PageRequest(
        size=resolve_param(query, size_param),
        number=resolve_param(query, PAGE_NUMBER),
    )
