"""Schema changes for the options table, one list of statements per version step.

These are handed to whatever migration runner the application uses; nothing
here talks to a database.
"""

from __future__ import annotations

CURRENT_SCHEMA_VERSION = 4

MIGRATIONS: dict[int, tuple[str, ...]] = {
    # 2 -> 3: widen value to LONGTEXT utf8mb4
    3: (
        "ALTER TABLE `options` CHANGE `value` `value` LONGTEXT CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci",
    ),
    # 3 -> 4: compare values byte for byte
    4: (
        "ALTER TABLE `options` CHANGE `value` `value` LONGTEXT CHARACTER SET utf8mb4 COLLATE utf8mb4_bin",
    ),
}


def migration_statements(from_version: int, to_version: int) -> list[str]:
    """Return the statements upgrading the table from ``from_version`` to ``to_version``.

    Raises:
        ValueError: when no chain of steps connects the two versions
    """
    if to_version < from_version:
        raise ValueError(f"Downgrades are not supported ({from_version} -> {to_version})")

    statements: list[str] = []
    for version in range(from_version + 1, to_version + 1):
        step = MIGRATIONS.get(version)
        if step is None:
            raise ValueError(f"No migration from version {version - 1} to {version}")
        statements.extend(step)
    return statements


def migration_statements_from_2_to_3() -> list[str]:
    return migration_statements(2, 3)


def migration_statements_from_3_to_4() -> list[str]:
    return migration_statements(3, 4)


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "MIGRATIONS",
    "migration_statements",
    "migration_statements_from_2_to_3",
    "migration_statements_from_3_to_4",
]
