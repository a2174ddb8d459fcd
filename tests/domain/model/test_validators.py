from __future__ import annotations

import pytest

from settee.domain.model import BLANK_MESSAGE, is_blank, required
from tests.helpers.documents import Category


@pytest.mark.parametrize("value", [None, "", "   ", [], {}])
def test_blank_values(value: object) -> None:
    assert is_blank(value)


@pytest.mark.parametrize("value", ["x", 0, False, [0], {"a": 1}])
def test_present_values(value: object) -> None:
    assert not is_blank(value)


def test_required_reports_every_blank_field() -> None:
    validate = required("name", "id")

    assert list(validate(Category())) == [("name", BLANK_MESSAGE), ("id", BLANK_MESSAGE)]


def test_required_with_custom_message() -> None:
    validate = required("name", message="is missing")

    assert list(validate(Category(name=""))) == [("name", "is missing")]
    assert list(validate(Category(name="pizza"))) == []
