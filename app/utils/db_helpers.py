"""
Database Helper Utilities for Concurrency Control

Provides:
- PostgreSQL detection for the health report
- Compare-and-set updates keyed on a column value
- Translation of driver failures into StoreUnavailable
"""

import logging
from contextlib import contextmanager
from typing import TypeVar, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar('T')


def is_postgres(db: Session) -> bool:
    """Check if the database is PostgreSQL"""
    try:
        return db.bind.dialect.name == 'postgresql'
    except AttributeError:
        return False


def compare_and_set(
    db: Session,
    model: Type[T],
    filter_condition,
    column_name: str,
    expected,
    new_value
) -> bool:
    """
    Atomically set a column only if it still holds the expected value.

    Issues a single UPDATE ... WHERE <filter> AND <column> = :expected, so the
    database decides the winner when several sessions race on the same row.
    No row is read or locked beforehand.

    Returns:
        True if exactly one row changed, False if the row is missing or
        no longer holds the expected value.

    Example:
        compare_and_set(db, Room, Room.id == room_id, "status", "Available", "Booked")
    """
    column = getattr(model, column_name)

    changed = db.query(model).filter(
        filter_condition,
        column == expected
    ).update({column_name: new_value}, synchronize_session=False)

    if changed > 1:
        logger.error(f"compare_and_set matched {changed} rows on {model.__name__}")

    return changed == 1


@contextmanager
def store_errors(operation: str):
    """
    Map driver/ORM failures (connection loss, lock or statement timeout)
    onto StoreUnavailable.

    Example:
        with store_errors("find_room"):
            return db.query(Room).filter(Room.id == room_id).first()
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Ledger store failure during {operation}: {e}")
        raise StoreUnavailable(f"Ledger store unavailable ({operation})") from e
