from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.database import get_db
from app.crud import crud
from app.schemas import schemas

router = APIRouter()
MAX_LOAN_DAYS = 3650

@router.post("/books/", response_model=schemas.BookOut)
def create_book(book_in: schemas.BookCreate, db: Session = Depends(get_db)):
    return crud.create_book(db, book_in)

@router.get("/books/", response_model=List[schemas.BookOut])
def list_books(q: Optional[str] = Query(None, description="search title or author"),
               genre: Optional[str] = None, skip: int = 0, limit: int = 20,
               db: Session = Depends(get_db)):
    return crud.list_books(db, q=q, genre=genre, skip=skip, limit=limit)

@router.get("/books/{book_id}", response_model=schemas.BookOut)
def read_book(book_id: int, db: Session = Depends(get_db)):
    return crud.get_book(db, book_id)

@router.put("/books/{book_id}", response_model=schemas.BookOut)
def update_book(book_id: int, book_upd: schemas.BookUpdate, db: Session = Depends(get_db)):
    return crud.update_book(db, book_id, book_upd)

@router.delete("/books/{book_id}")
def delete_book(book_id: int, db: Session = Depends(get_db)):
    crud.delete_book(db, book_id)
    return {"ok": True}

@router.post("/members/", response_model=schemas.MemberOut)
def create_member(member_in: schemas.MemberCreate, db: Session = Depends(get_db)):
    return crud.create_member(db, member_in)

@router.get("/members/", response_model=List[schemas.MemberOut])
def list_members(skip: int = 0, limit: int = 50, db: Session = Depends(get_db)):
    return crud.list_members(db, skip=skip, limit=limit)

@router.get("/members/{member_id}", response_model=schemas.MemberOut)
def read_member(member_id: int, db: Session = Depends(get_db)):
    return crud.get_member(db, member_id)

@router.delete("/members/{member_id}")
def delete_member(member_id: int, db: Session = Depends(get_db)):
    crud.delete_member(db, member_id)
    return {"ok": True}

@router.post("/borrowings/borrow", response_model=schemas.BorrowingOut)
def borrow_book(member_id: int, book_id: int,
                days: Optional[int] = Query(None, ge=0, le=MAX_LOAN_DAYS, description="loan length in days"),
                db: Session = Depends(get_db)):
    return crud.borrow_book(db, member_id, book_id, days=days)

@router.post("/borrowings/{borrowing_id}/return", response_model=schemas.BorrowingOut)
def return_book(borrowing_id: int, db: Session = Depends(get_db)):
    return crud.return_book(db, borrowing_id)

@router.get("/borrowings/", response_model=List[schemas.BorrowingOut])
def list_borrowings(open: Optional[bool] = None, skip: int = 0, limit: int = 50, db: Session = Depends(get_db)):
    return crud.list_borrowings(db, open_only=open, skip=skip, limit=limit)
