"""Persisted option rows."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlalchemy import Column, Text
from sqlalchemy.dialects import mysql
from sqlmodel import Field, SQLModel

# MySQL keeps values byte-exact (case and accent sensitive); other dialects use plain TEXT.
VALUE_COLUMN_TYPE = Text().with_variant(
    mysql.LONGTEXT(charset="utf8mb4", collation="utf8mb4_bin"), "mysql", "mariadb"
)


class OptionRecord(SQLModel, table=True):
    """One stored option: a unique key and its text value (NULL allowed)."""

    __tablename__: ClassVar[str] = "options"

    key: str = Field(primary_key=True, max_length=255)
    value: Optional[str] = Field(
        default=None, sa_column=Column("value", VALUE_COLUMN_TYPE, nullable=True)
    )
