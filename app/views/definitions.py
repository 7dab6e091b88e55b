"""SELECT statements behind the six library views.

Each function returns a fresh :class:`~sqlalchemy.sql.Select`; the registry
executes them for reads and ``app.views.ddl`` compiles them into persisted
``CREATE VIEW`` statements.
"""
from datetime import date

from sqlalchemy import Date, and_, func, literal, select

from app.models.models import Book, Member, Borrowing
from app.views.sqlfuncs import days_between


def open_borrowing():
    return Borrowing.return_date.is_(None)


def current_borrowings():
    return (
        select(
            Borrowing.borrowing_id,
            Book.book_id,
            Book.title,
            Book.author,
            Member.member_id,
            Member.member_name,
            Borrowing.borrow_date,
            Borrowing.due_date,
        )
        .select_from(Borrowing)
        .join(Book, Borrowing.book_id == Book.book_id)
        .join(Member, Borrowing.member_id == Member.member_id)
        .where(open_borrowing())
    )


def active_members():
    # outer join keeps members without open loans (count 0, date NULL)
    return (
        select(
            Member.member_id,
            Member.member_name,
            func.count(Borrowing.borrowing_id).label("borrowed_books"),
            func.max(Borrowing.borrow_date).label("last_borrow_date"),
        )
        .select_from(Member)
        .outerjoin(Borrowing, and_(Member.member_id == Borrowing.member_id, open_borrowing()))
        .group_by(Member.member_id, Member.member_name)
    )


def books_by_genre():
    return (
        select(
            Book.genre,
            func.count().label("total_books"),
            func.sum(Book.available_copies).label("available_copies"),
        )
        .group_by(Book.genre)
    )


def overdue_books(today=None):
    """Open borrowings past their due date as of ``today``.

    ``today`` is a date or a SQL date expression. When omitted the date is
    taken at call time, so a statement must be rebuilt for each evaluation.
    """
    if today is None:
        today = date.today()
    if isinstance(today, date):
        today = literal(today, Date)
    return (
        select(
            Borrowing.borrowing_id,
            Book.book_id,
            Book.title,
            Member.member_id,
            Member.member_name,
            Borrowing.borrow_date,
            Borrowing.due_date,
            days_between(Borrowing.due_date, today).label("days_overdue"),
        )
        .select_from(Borrowing)
        .join(Book, Borrowing.book_id == Book.book_id)
        .join(Member, Borrowing.member_id == Member.member_id)
        .where(open_borrowing(), Borrowing.due_date < today)
    )


def book_titles():
    return select(Book.book_id, Book.title)


def has_available_copies():
    return Book.available_copies > 0


def available_books():
    return select(Book.book_id, Book.title, Book.available_copies).where(has_available_copies())
