from sqlalchemy import Column, Integer, String, Date, ForeignKey, text
from sqlalchemy.orm import relationship
from datetime import date
from app.core.database import Base

class Book(Base):
    __tablename__ = "books"
    book_id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False)
    published_year = Column(Integer, nullable=True)
    genre = Column(String(100), nullable=True, index=True)
    # 0 <= available_copies <= total_copies is kept by borrow/return, not by the schema
    available_copies = Column(Integer, default=0, server_default=text("0"))
    total_copies = Column(Integer, default=0, server_default=text("0"))
    # no cascade: the foreign key refuses to delete a book that has borrowings
    borrowings = relationship("Borrowing", back_populates="book", passive_deletes="all")

    def __repr__(self):
        return f"<Book(id={self.book_id}, title='{self.title}')>"

class Member(Base):
    __tablename__ = "members"
    member_id = Column(Integer, primary_key=True, index=True)
    member_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True)
    join_date = Column(Date, default=date.today, server_default=text("CURRENT_DATE"))
    borrowings = relationship("Borrowing", back_populates="member", passive_deletes="all")

    def __repr__(self):
        return f"<Member(id={self.member_id}, name='{self.member_name}')>"

class Borrowing(Base):
    __tablename__ = "borrowings"
    borrowing_id = Column(Integer, primary_key=True, index=True)
    book_id = Column(Integer, ForeignKey("books.book_id"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("members.member_id"), nullable=False, index=True)
    borrow_date = Column(Date, nullable=False, default=date.today, server_default=text("CURRENT_DATE"))
    due_date = Column(Date, nullable=True)
    # NULL while the book is out
    return_date = Column(Date, nullable=True, index=True)
    book = relationship("Book", back_populates="borrowings")
    member = relationship("Member", back_populates="borrowings")

    @property
    def is_open(self):
        return self.return_date is None

    def __repr__(self):
        return f"<Borrowing(id={self.borrowing_id}, book_id={self.book_id}, member_id={self.member_id})>"
