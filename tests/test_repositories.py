"""Unit tests for the option repository."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from optionstore.infra.database import after_commit, after_rollback, option_transaction, session_scope
from optionstore.infra.repositories import SQLModelOptionRepository


def test_select_missing_key(db_engine):
    with session_scope(db_engine) as session:
        assert SQLModelOptionRepository(session).select_by_key("foo") is None


def test_insert_and_select(db_engine, get_row):
    with session_scope(db_engine) as session:
        SQLModelOptionRepository(session).insert("foo", "1")

    assert get_row("foo").value == "1"


def test_update_missing_key_returns_none(db_engine, count_rows):
    with session_scope(db_engine) as session:
        assert SQLModelOptionRepository(session).update_by_key("foo", "1") is None

    assert count_rows() == 0


def test_upsert_inserts_then_updates(db_engine, get_row, count_rows):
    with session_scope(db_engine) as session:
        repo = SQLModelOptionRepository(session)
        repo.upsert("foo", "1")
        repo.upsert("foo", None)

    assert get_row("foo").value is None
    assert count_rows() == 1


def test_duplicate_insert_violates_unique_key(db_engine, put_row, count_rows):
    put_row("foo", "1")

    with pytest.raises(IntegrityError):
        with session_scope(db_engine) as session:
            SQLModelOptionRepository(session).insert("foo", "2")

    assert count_rows() == 1


def test_long_unicode_values_round_trip(db_engine, get_row):
    text = "значение " * 10_000

    with session_scope(db_engine) as session:
        SQLModelOptionRepository(session).insert("long", text)

    assert get_row("long").value == text


def test_option_transaction_reuses_session_per_engine(db_engine, other_engine):
    with option_transaction(db_engine) as outer:
        with option_transaction(db_engine) as inner:
            assert inner is outer
        with option_transaction(other_engine) as elsewhere:
            assert elsewhere is not outer
            assert isinstance(elsewhere, Session)

    with option_transaction(db_engine) as fresh:
        assert fresh is not outer


def test_after_commit_waits_for_outermost_scope(db_engine):
    calls = []

    with option_transaction(db_engine) as outer:
        with option_transaction(db_engine) as inner:
            after_commit(inner, lambda: calls.append("committed"))
            after_rollback(inner, lambda: calls.append("rolled back"))
        assert calls == []
        assert outer is inner

    assert calls == ["committed"]


def test_rollback_discards_commit_callbacks(db_engine, count_rows):
    calls = []

    with pytest.raises(RuntimeError):
        with option_transaction(db_engine) as session:
            SQLModelOptionRepository(session).insert("foo", "1")
            after_commit(session, lambda: calls.append("committed"))
            after_rollback(session, lambda: calls.append("rolled back"))
            raise RuntimeError("boom")

    assert calls == ["rolled back"]
    assert count_rows() == 0
