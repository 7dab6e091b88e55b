"""Named views and the rules for writing through them.

Every view carries a capability tag instead of leaving updatability to the
engine:

* ``read-only``: joins and aggregates; any write is rejected.
* ``key-preserving``: a single-table projection that keeps the primary key;
  writes map one-to-one onto the base row.
* ``check-option``: a key-preserving projection with a filter; the
  post-image of every write is re-validated against the filter inside the
  same transaction and the write is rolled back if the row would drop out of
  the view.
"""
import enum
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError, create_model
from sqlalchemy import exists, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    CheckOptionViolation,
    IntegrityViolation,
    InvalidOperation,
    NonUpdatableViewError,
    NotFoundError,
)
from app.models.models import Book
from app.schemas.schemas import AvailableBookRow, BookTitleRow
from app.views import definitions

logger = logging.getLogger("librarydb.views")


class Capability(str, enum.Enum):
    READ_ONLY = "read-only"
    KEY_PRESERVING = "key-preserving"
    CHECK_OPTION = "check-option"


@dataclass(frozen=True)
class ViewDefinition:
    name: str
    query: Callable[..., Any]
    capability: Capability = Capability.READ_ONLY
    model: Optional[type] = None
    key: Optional[str] = None
    columns: Tuple[str, ...] = ()
    predicate: Optional[Callable[[], Any]] = None
    row_model: Optional[type] = None

    @property
    def writable(self) -> bool:
        return self.capability is not Capability.READ_ONLY

    def key_column(self):
        return getattr(self.model, self.key)

    def filters(self):
        return [self.predicate()] if self.predicate is not None else []


VIEWS: Dict[str, ViewDefinition] = {
    v.name: v
    for v in (
        ViewDefinition("current_borrowings", definitions.current_borrowings),
        ViewDefinition("active_members", definitions.active_members),
        ViewDefinition("books_by_genre", definitions.books_by_genre),
        ViewDefinition("overdue_books", definitions.overdue_books),
        ViewDefinition(
            "book_titles",
            definitions.book_titles,
            capability=Capability.KEY_PRESERVING,
            model=Book,
            key="book_id",
            columns=("book_id", "title"),
            row_model=BookTitleRow,
        ),
        ViewDefinition(
            "available_books",
            definitions.available_books,
            capability=Capability.CHECK_OPTION,
            model=Book,
            key="book_id",
            columns=("book_id", "title", "available_copies"),
            predicate=definitions.has_available_copies,
            row_model=AvailableBookRow,
        ),
    )
}


def get_view(name: str) -> ViewDefinition:
    view = VIEWS.get(name)
    if view is None:
        raise NotFoundError(f"Unknown view '{name}'")
    return view


def list_views() -> List[Dict[str, str]]:
    return [{"name": v.name, "capability": v.capability.value} for v in VIEWS.values()]


def select_rows(db: Session, name: str, **params) -> List[Dict[str, Any]]:
    """Evaluate a view now; parameters go to its query builder (``today`` for overdue_books)."""
    view = get_view(name)
    return [dict(row) for row in db.execute(view.query(**params)).mappings()]


def _writable_view(name: str) -> ViewDefinition:
    view = get_view(name)
    if not view.writable:
        logger.warning(f"Rejected write through read-only view {name}")
        raise NonUpdatableViewError(name)
    return view


def _check_columns(view: ViewDefinition, values: Dict[str, Any], allow_key: bool):
    if not values:
        raise InvalidOperation(f"No columns given for view '{view.name}'")
    allowed = set(view.columns) if allow_key else set(view.columns) - {view.key}
    unknown = sorted(set(values) - allowed)
    if unknown:
        raise InvalidOperation(f"View '{view.name}' has no writable column(s): {', '.join(unknown)}")


@lru_cache(maxsize=None)
def _write_model(row_model: type) -> type:
    """``row_model`` with every field optional, for partial writes."""
    fields = {name: (Optional[field.annotation], None) for name, field in row_model.model_fields.items()}
    return create_model(f"{row_model.__name__}Write", __base__=BaseModel, **fields)


def _validate_values(view: ViewDefinition, values: Dict[str, Any]) -> Dict[str, Any]:
    # NULLs pass through; the base table's NOT NULL constraints decide on them
    try:
        parsed = _write_model(view.row_model).model_validate(values)
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
        logger.warning(f"Rejected write through {view.name}: {problems}")
        raise InvalidOperation(f"Invalid value(s) for view '{view.name}': {problems}") from exc
    return {column: getattr(parsed, column) for column in values}


def _visible_row(db: Session, view: ViewDefinition, key):
    """Base row behind ``key``, only if the view currently shows it."""
    row = db.query(view.model).filter(view.key_column() == key, *view.filters()).first()
    if row is None:
        raise NotFoundError(f"No row {key} in view '{view.name}'")
    return row


def _as_view_row(view: ViewDefinition, row) -> Dict[str, Any]:
    return {c: getattr(row, c) for c in view.columns}


def _flush(db: Session, view: ViewDefinition):
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity violation writing through {view.name}: {exc.orig}")
        raise IntegrityViolation(str(exc.orig)) from exc
    except DBAPIError as exc:
        # out-of-range or mistyped data rejected by the engine
        db.rollback()
        logger.warning(f"Engine rejected write through {view.name}: {exc.orig}")
        raise InvalidOperation(str(exc.orig)) from exc


def _enforce_check_option(db: Session, view: ViewDefinition, key):
    # runs after flush, before commit: the post-image is visible to this transaction only
    if view.capability is not Capability.CHECK_OPTION:
        return
    still_visible = db.scalar(select(exists().where(view.key_column() == key, *view.filters())))
    if not still_visible:
        db.rollback()
        logger.warning(f"Check option rejected write through {view.name} for key {key}")
        raise CheckOptionViolation(view.name, key)


def update_row(db: Session, name: str, key, values: Dict[str, Any]) -> Dict[str, Any]:
    view = _writable_view(name)
    _check_columns(view, values, allow_key=False)
    values = _validate_values(view, values)
    row = _visible_row(db, view, key)
    for column, value in values.items():
        setattr(row, column, value)
    _flush(db, view)
    _enforce_check_option(db, view, key)
    db.commit()
    db.refresh(row)
    logger.info(f"Updated {view.model.__tablename__} {key} through view {name}: {sorted(values)}")
    return _as_view_row(view, row)


def insert_row(db: Session, name: str, values: Dict[str, Any]) -> Dict[str, Any]:
    """Insert through a view; base columns the view hides take their defaults."""
    view = _writable_view(name)
    _check_columns(view, values, allow_key=True)
    values = _validate_values(view, values)
    row = view.model(**values)
    db.add(row)
    _flush(db, view)
    key = getattr(row, view.key)
    _enforce_check_option(db, view, key)
    db.commit()
    db.refresh(row)
    logger.info(f"Inserted {view.model.__tablename__} {key} through view {name}")
    return _as_view_row(view, row)


def delete_row(db: Session, name: str, key):
    view = _writable_view(name)
    row = _visible_row(db, view, key)
    db.delete(row)
    _flush(db, view)
    db.commit()
    logger.info(f"Deleted {view.model.__tablename__} {key} through view {name}")
