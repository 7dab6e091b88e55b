from pydantic import BaseModel, ConfigDict, Field, constr, field_validator
from datetime import date
from typing import Optional

class BookBase(BaseModel):
    title: constr(min_length=1)
    author: constr(min_length=1)
    published_year: Optional[int] = None
    genre: Optional[str] = None
    total_copies: int = Field(default=0, ge=0)

class BookCreate(BookBase):
    # defaults to total_copies when omitted
    available_copies: Optional[int] = Field(default=None, ge=0)

    @field_validator('available_copies')
    @classmethod
    def not_more_than_total(cls, v, info):
        total = info.data.get('total_copies')
        if v is not None and total is not None and v > total:
            raise ValueError('available_copies must be <= total_copies')
        return v

class BookUpdate(BaseModel):
    title: Optional[constr(min_length=1)] = None
    author: Optional[constr(min_length=1)] = None
    published_year: Optional[int] = None
    genre: Optional[str] = None
    total_copies: Optional[int] = Field(default=None, ge=0)

class BookOut(BookBase):
    book_id: int
    available_copies: Optional[int]
    total_copies: Optional[int]
    model_config = ConfigDict(from_attributes=True)

class MemberBase(BaseModel):
    member_name: constr(min_length=1)
    email: Optional[constr(min_length=5)] = None

class MemberCreate(MemberBase):
    join_date: Optional[date] = None

class MemberOut(MemberBase):
    member_id: int
    join_date: Optional[date]
    model_config = ConfigDict(from_attributes=True)

class BorrowingOut(BaseModel):
    borrowing_id: int
    book_id: int
    member_id: int
    borrow_date: date
    due_date: Optional[date]
    return_date: Optional[date]
    model_config = ConfigDict(from_attributes=True)

# View rows

class ViewInfo(BaseModel):
    name: str
    capability: str

class CurrentBorrowingRow(BaseModel):
    borrowing_id: int
    book_id: int
    title: str
    author: str
    member_id: int
    member_name: str
    borrow_date: date
    due_date: Optional[date]

class ActiveMemberRow(BaseModel):
    member_id: int
    member_name: str
    borrowed_books: int
    last_borrow_date: Optional[date]

class GenreRow(BaseModel):
    genre: Optional[str]
    total_books: int
    available_copies: Optional[int]

class OverdueBookRow(BaseModel):
    borrowing_id: int
    book_id: int
    title: str
    member_id: int
    member_name: str
    borrow_date: date
    due_date: date
    days_overdue: int

class BookTitleRow(BaseModel):
    book_id: int
    title: str

class AvailableBookRow(BaseModel):
    book_id: int
    title: str
    available_copies: int
