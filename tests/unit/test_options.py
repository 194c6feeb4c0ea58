from __future__ import annotations

import pytest

from lib_nested_store_attributes.domain.errors import UnknownOption
from lib_nested_store_attributes.domain.options import (
    UNASSIGNABLE_KEYS,
    ReconcileOptions,
    has_destroy_flag,
    is_blank,
    is_present,
    reject_all_blank,
    value_to_boolean,
)


def test_defaults() -> None:
    options = ReconcileOptions()
    assert options.allow_destroy is False
    assert options.reject_if is None
    assert options.limit is None
    assert options.update_only is False
    assert options.primary_key == "id"


def test_unassignable_keys() -> None:
    assert UNASSIGNABLE_KEYS == frozenset({"id", "_destroy"})


def test_from_mapping_rejects_unknown_keys() -> None:
    with pytest.raises(UnknownOption) as excinfo:
        ReconcileOptions.from_mapping({"allow_destroy": True, "autosave": True})
    assert excinfo.value.options == ("autosave",)


def test_from_mapping_accepts_legacy_update_only() -> None:
    assert ReconcileOptions.from_mapping({"update_only": True}).update_only is True


def test_from_mapping_stringifies_primary_key() -> None:
    class Key:
        def __str__(self) -> str:
            return "email"

    assert ReconcileOptions.from_mapping({"primary_key": Key()}).primary_key == "email"


def test_all_blank_keyword_resolves_to_predicate() -> None:
    assert ReconcileOptions.from_mapping({"reject_if": "all_blank"}).reject_if is reject_all_blank


def test_non_callable_reject_if_is_refused() -> None:
    with pytest.raises(TypeError):
        ReconcileOptions.from_mapping({"reject_if": "some_method"})


def test_options_are_frozen() -> None:
    options = ReconcileOptions()
    with pytest.raises(AttributeError):
        options.allow_destroy = True  # type: ignore[misc]


@pytest.mark.parametrize("value", [True, 1, "1", "true", "t", "on", "TRUE"])
def test_truthy_destroy_values(value: object) -> None:
    assert value_to_boolean(value) is True
    assert has_destroy_flag({"_destroy": value}) is True


@pytest.mark.parametrize("value", [False, 0, "0", "false", "", None, "yes", {"nested": 1}, [1]])
def test_falsy_destroy_values(value: object) -> None:
    assert value_to_boolean(value) is False


def test_missing_destroy_flag_is_falsy() -> None:
    assert has_destroy_flag({"name": "x"}) is False


@pytest.mark.parametrize("value", [None, False, "", "   ", [], {}, ()])
def test_blank_values(value: object) -> None:
    assert is_blank(value)
    assert not is_present(value)


@pytest.mark.parametrize("value", [0, 0.0, "x", [None], {"a": 1}, True])
def test_present_values(value: object) -> None:
    assert is_present(value)


def test_reject_all_blank_ignores_destroy() -> None:
    assert reject_all_blank({"name": " ", "title": None, "_destroy": "1"})
    assert reject_all_blank({})
    assert not reject_all_blank({"name": "dune", "_destroy": ""})


def test_should_reject_skips_destroy_flagged_records() -> None:
    calls: list[dict] = []

    def reject_everything(record):
        calls.append(record)
        return True

    options = ReconcileOptions(reject_if=reject_everything)
    assert options.should_reject({"_destroy": True}) is False
    assert calls == []
    assert options.should_reject({"name": "x"}) is True
