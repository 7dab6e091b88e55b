"""Base-table operations: books, members, and the borrow/return cycle.

Every function commits its own transaction; on failure the session is
rolled back before a domain error from ``app.core.errors`` is raised.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import LOAN_DAYS
from app.core.errors import IntegrityViolation, InvalidOperation, NotFoundError
from app.models import models
from app.schemas import schemas

logger = logging.getLogger("librarydb.crud")


def _commit(db: Session):
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"Integrity violation: {exc.orig}")
        raise IntegrityViolation(str(exc.orig)) from exc

# -----------------------------
# Books
# -----------------------------

def create_book(db: Session, book_in: schemas.BookCreate) -> models.Book:
    available = book_in.available_copies
    book = models.Book(
        title=book_in.title.strip(),
        author=book_in.author.strip(),
        published_year=book_in.published_year,
        genre=book_in.genre,
        total_copies=book_in.total_copies,
        available_copies=book_in.total_copies if available is None else available,
    )
    db.add(book)
    _commit(db)
    db.refresh(book)
    logger.info(f"Created book id={book.book_id} title={book.title}")
    return book


def get_book(db: Session, book_id: int) -> models.Book:
    book = db.query(models.Book).filter(models.Book.book_id == book_id).first()
    if not book:
        raise NotFoundError("Book not found")
    return book


def list_books(db: Session, q: Optional[str] = None, genre: Optional[str] = None,
               skip: int = 0, limit: int = 20) -> List[models.Book]:
    query = db.query(models.Book)
    if q:
        like_q = f"%{q}%"
        query = query.filter((models.Book.title.ilike(like_q)) | (models.Book.author.ilike(like_q)))
    if genre:
        query = query.filter(models.Book.genre == genre)
    return query.order_by(models.Book.title).offset(skip).limit(limit).all()


def update_book(db: Session, book_id: int, book_upd: schemas.BookUpdate) -> models.Book:
    book = get_book(db, book_id)
    data = book_upd.model_dump(exclude_unset=True)
    # a change of total_copies moves available_copies by the same delta, floored at 0
    if data.get('total_copies') is not None:
        delta = data['total_copies'] - (book.total_copies or 0)
        book.available_copies = max(0, (book.available_copies or 0) + delta)
        book.total_copies = data.pop('total_copies')
    data.pop('total_copies', None)
    for k, v in data.items():
        setattr(book, k, v)
    _commit(db)
    db.refresh(book)
    logger.info(f"Updated book id={book.book_id}")
    return book


def delete_book(db: Session, book_id: int):
    book = get_book(db, book_id)
    db.delete(book)
    _commit(db)
    logger.info(f"Deleted book id={book_id}")

# -----------------------------
# Members
# -----------------------------

def create_member(db: Session, member_in: schemas.MemberCreate) -> models.Member:
    email = member_in.email.strip() if member_in.email else None
    if email and db.query(models.Member).filter(models.Member.email == email).first():
        raise IntegrityViolation("Email already registered")
    member = models.Member(member_name=member_in.member_name.strip(), email=email)
    if member_in.join_date is not None:
        member.join_date = member_in.join_date
    db.add(member)
    _commit(db)
    db.refresh(member)
    logger.info(f"Created member id={member.member_id} email={member.email}")
    return member


def get_member(db: Session, member_id: int) -> models.Member:
    member = db.query(models.Member).filter(models.Member.member_id == member_id).first()
    if not member:
        raise NotFoundError("Member not found")
    return member


def list_members(db: Session, skip: int = 0, limit: int = 50) -> List[models.Member]:
    return db.query(models.Member).order_by(models.Member.member_name).offset(skip).limit(limit).all()


def delete_member(db: Session, member_id: int):
    member = get_member(db, member_id)
    db.delete(member)
    _commit(db)
    logger.info(f"Deleted member id={member_id}")

# -----------------------------
# Borrowings (borrow & return)
# -----------------------------

def borrow_book(db: Session, member_id: int, book_id: int, days: Optional[int] = None,
                today: Optional[date] = None) -> models.Borrowing:
    today = today or date.today()
    days = LOAN_DAYS if days is None else days
    if days < 0:
        raise InvalidOperation("Loan length must not be negative")
    try:
        due_date = today + timedelta(days=days)
    except OverflowError as exc:
        raise InvalidOperation(f"Loan length of {days} days is out of range") from exc
    member = db.query(models.Member).filter(models.Member.member_id == member_id).first()
    book = db.query(models.Book).filter(models.Book.book_id == book_id).with_for_update().first()
    if not member or not book:
        raise NotFoundError("Member or Book not found")
    if (book.available_copies or 0) < 1:
        raise InvalidOperation("No copies available")
    borrowing = models.Borrowing(member_id=member.member_id, book_id=book.book_id,
                                 borrow_date=today, due_date=due_date)
    book.available_copies -= 1
    db.add(borrowing)
    _commit(db)
    db.refresh(borrowing)
    logger.info(f"Member {member.member_id} borrowed book {book.book_id} borrowing {borrowing.borrowing_id}")
    return borrowing


def return_book(db: Session, borrowing_id: int, today: Optional[date] = None) -> models.Borrowing:
    borrowing = db.query(models.Borrowing).filter(models.Borrowing.borrowing_id == borrowing_id).first()
    if not borrowing:
        raise NotFoundError("Borrowing not found")
    if not borrowing.is_open:
        raise InvalidOperation("Borrowing already closed")
    borrowing.return_date = today or date.today()
    book = borrowing.book
    book.available_copies = min(book.total_copies or 0, (book.available_copies or 0) + 1)
    _commit(db)
    db.refresh(borrowing)
    logger.info(f"Borrowing {borrowing_id} returned")
    return borrowing


def list_borrowings(db: Session, open_only: Optional[bool] = None,
                    skip: int = 0, limit: int = 50) -> List[models.Borrowing]:
    query = db.query(models.Borrowing).order_by(models.Borrowing.borrow_date.desc())
    if open_only is True:
        query = query.filter(models.Borrowing.return_date.is_(None))
    elif open_only is False:
        query = query.filter(models.Borrowing.return_date.is_not(None))
    return query.offset(skip).limit(limit).all()
