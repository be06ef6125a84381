from __future__ import annotations

import pytest

from tasklist.errors import ValidationError
from tasklist.validation import validate_reorder_entries, validate_task_id, validate_task_input


def test_title_is_trimmed_and_empty_description_normalized() -> None:
    assert validate_task_input("  Buy milk  ", "   ") == ("Buy milk", None)
    assert validate_task_input("Buy milk", None) == ("Buy milk", None)
    assert validate_task_input("Buy milk", " 2 litres ") == ("Buy milk", "2 litres")


@pytest.mark.parametrize("title", [None, "", "   "])
def test_title_required(title) -> None:
    with pytest.raises(ValidationError) as ei:
        validate_task_input(title)
    assert ei.value.field == "title"


def test_title_length_counts_after_trim() -> None:
    assert validate_task_input(" " + "a" * 100 + " ")[0] == "a" * 100
    with pytest.raises(ValidationError) as ei:
        validate_task_input("a" * 101)
    assert ei.value.field == "title"


def test_description_limit() -> None:
    validate_task_input("t", "d" * 500)
    with pytest.raises(ValidationError) as ei:
        validate_task_input("t", "d" * 501)
    assert ei.value.field == "description"


def test_first_failing_rule_wins() -> None:
    with pytest.raises(ValidationError) as ei:
        validate_task_input("", "d" * 501)
    assert ei.value.field == "title"


def test_task_id() -> None:
    assert validate_task_id(7) == 7
    assert validate_task_id("12") == 12
    assert validate_task_id(2**63 - 1) == 2**63 - 1
    for bad in (0, -1, "abc", "1.5", True, None, 2.0, "\u00b2", "1\u00b9", 2**63, str(2**64)):
        with pytest.raises(ValidationError):
            validate_task_id(bad)


def test_reorder_entries() -> None:
    assert validate_reorder_entries([(3, 0), ("1", 1)]) == [(3, 0), (1, 1)]
    with pytest.raises(ValidationError):
        validate_reorder_entries([(1, -1)])
    with pytest.raises(ValidationError):
        validate_reorder_entries([(1, 0.5)])
    with pytest.raises(ValidationError):
        validate_reorder_entries([(1, 0), (1, 1)])
