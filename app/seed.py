"""Sample catalogue, members and loans so every view has something to show."""
import logging
from datetime import date

from sqlalchemy.orm import Session

from app.models.models import Book, Member, Borrowing

logger = logging.getLogger("librarydb.seed")

BOOKS = [
    # title, author, published_year, genre, available_copies, total_copies
    ("Clean Code", "Robert C. Martin", 2008, "Programming", 2, 3),
    ("The Pragmatic Programmer", "Andrew Hunt", 1999, "Programming", 1, 2),
    ("Design Patterns", "Erich Gamma", 1994, "Programming", 0, 1),
    ("Norwegian Wood", "Haruki Murakami", 1987, "Fiction", 4, 4),
    ("Atomic Habits", "James Clear", 2018, "Self-help", 2, 3),
]

MEMBERS = [
    ("Alice Kumar", "alice@example.com", date(2024, 6, 12)),
    ("Rishabh Kushwaha", "rbkush101@example.com", date(2025, 1, 15)),
    ("Deepa Singh", "deepa@example.com", date(2025, 8, 30)),
]

# (book index, member index, borrow_date, due_date, return_date)
BORROWINGS = [
    (0, 0, date(2025, 9, 20), date(2025, 10, 4), None),
    (1, 1, date(2025, 9, 28), date(2025, 10, 12), None),
    (2, 2, date(2025, 8, 25), date(2025, 9, 8), date(2025, 9, 5)),
]


def seed_sample_data(db: Session) -> bool:
    """Insert the sample rows into an empty database; returns False if data already exists."""
    if db.query(Book).count() or db.query(Member).count():
        logger.info("Database already has data, skipping seed")
        return False
    books = [Book(title=t, author=a, published_year=y, genre=g, available_copies=av, total_copies=tot)
             for t, a, y, g, av, tot in BOOKS]
    members = [Member(member_name=n, email=e, join_date=j) for n, e, j in MEMBERS]
    db.add_all(books + members)
    db.flush()
    db.add_all([
        Borrowing(book_id=books[b].book_id, member_id=members[m].member_id,
                  borrow_date=bd, due_date=dd, return_date=rd)
        for b, m, bd, dd, rd in BORROWINGS
    ])
    db.commit()
    logger.info("Seeded sample data")
    return True
