"""
Automatic additive schema migration for SQLite databases.
Compares SQLAlchemy models with the live schema and adds missing columns,
so databases created by older releases pick up new fields on startup.
"""
import sqlite3
import logging
from typing import Optional
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from family_tasks.database import engine as default_engine, Base
from family_tasks import models  # noqa: F401  registers all models

logger = logging.getLogger("family_tasks.migrations")


def get_table_columns(conn, table_name: str) -> dict:
    """Get existing columns from database table"""
    cursor = conn.cursor()
    cursor.execute(f"PRAGMA table_info({table_name})")
    columns = {}
    for row in cursor.fetchall():
        # row: (cid, name, type, notnull, dflt_value, pk)
        columns[row[1]] = {
            'type': row[2],
            'notnull': row[3],
            'default': row[4],
            'pk': row[5]
        }
    return columns


def sqlalchemy_type_to_sqlite(sa_type) -> str:
    """Map a SQLAlchemy column type to its SQLite storage class"""
    sa_type_upper = str(sa_type).upper()

    if 'INTEGER' in sa_type_upper or 'BOOLEAN' in sa_type_upper:
        return 'INTEGER'
    if 'FLOAT' in sa_type_upper or 'NUMERIC' in sa_type_upper or 'REAL' in sa_type_upper:
        return 'REAL'
    # VARCHAR, TEXT, JSON, DATE and DATETIME are all stored as text
    return 'TEXT'


def get_default_value(column) -> str:
    """Render a column's scalar default as SQL, or 'NULL'"""
    default = column.default
    if default is None or not hasattr(default, 'arg'):
        return 'NULL'

    value = default.arg
    if callable(value):
        # datetime.now defaults
        return 'CURRENT_TIMESTAMP' if 'datetime' in str(value) else 'NULL'
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    return 'NULL'


def auto_migrate(engine: Optional[Engine] = None) -> int:
    """
    Add columns that exist on the models but not in the database.

    Only SQLite is handled; other backends are expected to be migrated
    explicitly. Returns the number of columns added.
    """
    engine = engine or default_engine
    if engine.dialect.name != "sqlite":
        logger.info(f"Skipping automatic migration on {engine.dialect.name}")
        return 0

    logger.info("Starting automatic schema migration...")

    existing_tables = inspect(engine).get_table_names()
    conn = engine.raw_connection()
    cursor = conn.cursor()
    migrations_applied = 0

    try:
        for table_name, table in Base.metadata.tables.items():
            if table_name not in existing_tables:
                logger.warning(f"Table '{table_name}' doesn't exist. Run Base.metadata.create_all() first.")
                continue

            existing_columns = get_table_columns(conn, table_name)

            for column in table.columns:
                if column.name in existing_columns:
                    continue

                default_value = get_default_value(column)
                alter_sql = f"ALTER TABLE {table_name} ADD COLUMN {column.name} {sqlalchemy_type_to_sqlite(column.type)}"
                if default_value != 'NULL':
                    alter_sql += f" DEFAULT {default_value}"
                    # SQLite only accepts NOT NULL on added columns that carry a default
                    if not column.nullable:
                        alter_sql += " NOT NULL"

                logger.info(f"Adding column '{column.name}' to table '{table_name}'")
                try:
                    cursor.execute(alter_sql)
                    migrations_applied += 1
                except sqlite3.Error as e:
                    logger.error(f"Failed to add column {table_name}.{column.name}: {e}")

        conn.commit()

        if migrations_applied > 0:
            logger.info(f"Migration completed: {migrations_applied} column(s) added")
        else:
            logger.info("Schema is up to date - no migrations needed")

    except Exception as e:
        logger.error(f"Migration failed: {e}")
        conn.rollback()
        raise
    finally:
        conn.close()

    return migrations_applied


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    auto_migrate()
