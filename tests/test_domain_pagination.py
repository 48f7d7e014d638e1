"""
Tests for the pagination resolver.

Pure functions over query mappings. No external dependencies or IO required.
"""

import pytest

from modelview.domain.pagination import (
    PAGE_NUMBER,
    PAGE_SIZE,
    PageParam,
    PageRequest,
    resolve_page,
    resolve_param,
)


class TestResolveParam:
    """Tests for the generic resolve_param function."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("10", 10), ("0", 0), ("+7", 7), ("18446744073709551615", 2**64 - 1)],
    )
    def test_valid_page_size(self, raw: str, expected: int) -> None:
        """Unsigned decimal strings are accepted as-is."""
        assert resolve_param({"page_size": raw}, PAGE_SIZE) == expected

    @pytest.mark.parametrize(
        "raw", ["", "abc", "-1", "1.5", " 3", "1_000", "18446744073709551616"]
    )
    def test_malformed_page_size_uses_default(self, raw: str) -> None:
        """Anything that is not an unsigned 64-bit integer falls back."""
        assert resolve_param({"page_size": raw}, PAGE_SIZE) == 20

    def test_absent_parameter_uses_default(self) -> None:
        assert resolve_param({}, PAGE_SIZE) == 20
        assert resolve_param({}, PAGE_NUMBER) == 0

    @pytest.mark.parametrize(
        ("raw", "expected"), [("0", 0), ("1", 0), ("2", 1), ("10", 9)]
    )
    def test_page_number_is_one_based(self, raw: str, expected: int) -> None:
        """page_num is shifted down by one, clamped at zero."""
        assert resolve_param({"page_num": raw}, PAGE_NUMBER) == expected

    def test_custom_adjustment(self) -> None:
        """Values below the adjustment are left untouched."""
        param = PageParam(name="skip", default=5, offset_adjustment=3)

        assert resolve_param({"skip": "2"}, param) == 2
        assert resolve_param({"skip": "3"}, param) == 0
        assert resolve_param({}, param) == 2

    def test_integer_values_are_accepted(self) -> None:
        """Already-decoded integers are treated like their text form."""
        assert resolve_param({"page_size": 4}, PAGE_SIZE) == 4
        assert resolve_param({"page_size": True}, PAGE_SIZE) == 20


class TestResolvePage:
    """Tests for resolve_page and PageRequest."""

    def test_defaults(self) -> None:
        page = resolve_page({})

        assert page == PageRequest(size=20, number=0)
        assert not page.unpaginated
        assert page.offset == 0

    def test_size_zero_is_unpaginated(self) -> None:
        assert resolve_page({"page_size": "0"}).unpaginated

    def test_offset(self) -> None:
        """page_size=3&page_num=2 starts at row 3."""
        page = resolve_page({"page_size": "3", "page_num": "2"})

        assert page.number == 1
        assert page.offset == 3

    def test_configured_default_size(self) -> None:
        assert resolve_page({}, default_size=50).size == 50
        assert resolve_page({"page_size": "5"}, default_size=50).size == 5
