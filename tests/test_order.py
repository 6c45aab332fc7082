"""Tests for order validation and completion."""

import pytest

from goreorder.core.order import DEFAULT_ORDER, resolve_order, validate_order


def test_default_order_when_nothing_given():
    order = resolve_order()
    assert order.tokens == DEFAULT_ORDER
    assert order.extracted() == ()


def test_missing_categories_are_appended():
    order = resolve_order(["var", "const"])
    assert order.tokens == ("var", "const", "interface", "type", "func")


def test_special_functions_get_their_slot():
    order = resolve_order(["const", "var", "init", "main"])
    assert order.tokens == ("const", "var", "init", "main", "interface", "type", "func")
    assert order.extract_init and order.extract_main
    assert order.extracted() == ("init", "main")


def test_repeated_tokens_keep_first_position():
    order = resolve_order(["func", "const", "func"])
    assert order.tokens == ("func", "const", "var", "interface", "type")


def test_validate_normalizes():
    assert validate_order([" Const", "VAR ", ""]) == ("const", "var")


def test_validate_rejects_unknown_names():
    with pytest.raises(ValueError, match="invalid order name 'struct'"):
        validate_order(["const", "struct"])
