"""Required-option tracking and startup validation."""

from __future__ import annotations

from typing import Optional

import pytest

from optionstore import Option, OptionStore
from optionstore.errors import AggregateRequiredMissing, TransformError


def test_non_nullable_options_are_tracked(store):
    required = store.option("required1", int)
    store.option("optional1", Optional[int], resolver=Option.get_or_null)

    assert store.required_options == (required,)


def test_check_required_names_every_missing_key(store):
    store.option("required1", int)
    store.option("required2", int)
    store.option("required3", str, resolver=lambda o: o.get_or_set("value"))

    with pytest.raises(AggregateRequiredMissing) as excinfo:
        store.check_required()

    assert excinfo.value.keys == ["required1", "required2"]
    assert str(excinfo.value) == "Required options required1, required2 are not set in database"


def test_check_required_passes_when_populated(store, put_row):
    store.option("required1", int, resolver=lambda o: o.get_or_set(1))
    store.option("required2", str, resolver=lambda o: o.get_or_set("value"))
    put_row("required3", "3")
    store.option("required3", int)

    store.check_required()


def test_check_required_treats_none_result_as_missing(store):
    store.option("required1", int, resolver=Option.get_or_null)

    with pytest.raises(AggregateRequiredMissing) as excinfo:
        store.check_required()
    assert excinfo.value.keys == ["required1"]


def test_check_required_propagates_bad_data(store, put_row):
    put_row("required1", "not_a_number")
    store.option("required1", int)
    store.option("required2", int)

    with pytest.raises(TransformError) as excinfo:
        store.check_required()
    assert excinfo.value.key == "required1"


def test_check_required_logs_missing_keys(store, caplog):
    store.option("required1", int)

    with caplog.at_level("WARNING", logger="optionstore"):
        with pytest.raises(AggregateRequiredMissing):
            store.check_required()

    assert "required1" in caplog.text


def test_clear_required_untracks_everything(store):
    store.option("required1", int)
    store.option("required2", int)

    store.clear_required()

    assert store.required_options == ()
    store.check_required()


def test_stores_track_independently(db_engine):
    first = OptionStore(db_engine)
    second = OptionStore(db_engine)

    first.option("required1", int)

    assert len(first.required_options) == 1
    assert second.required_options == ()
    second.check_required()
