from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas import schemas
from app.views import registry

router = APIRouter(prefix="/views", tags=["views"])

@router.get("/", response_model=List[schemas.ViewInfo])
def list_views():
    return registry.list_views()

@router.get("/current_borrowings", response_model=List[schemas.CurrentBorrowingRow])
def current_borrowings(db: Session = Depends(get_db)):
    return registry.select_rows(db, "current_borrowings")

@router.get("/active_members", response_model=List[schemas.ActiveMemberRow])
def active_members(db: Session = Depends(get_db)):
    return registry.select_rows(db, "active_members")

@router.get("/books_by_genre", response_model=List[schemas.GenreRow])
def books_by_genre(db: Session = Depends(get_db)):
    return registry.select_rows(db, "books_by_genre")

@router.get("/overdue_books", response_model=List[schemas.OverdueBookRow])
def overdue_books(as_of: Optional[date] = Query(None, description="evaluate as of this date instead of today"),
                  db: Session = Depends(get_db)):
    return registry.select_rows(db, "overdue_books", today=as_of)

@router.get("/book_titles", response_model=List[schemas.BookTitleRow])
def book_titles(db: Session = Depends(get_db)):
    return registry.select_rows(db, "book_titles")

@router.get("/available_books", response_model=List[schemas.AvailableBookRow])
def available_books(db: Session = Depends(get_db)):
    return registry.select_rows(db, "available_books")

@router.get("/{view_name}")
def read_view(view_name: str, db: Session = Depends(get_db)):
    return registry.select_rows(db, view_name)

# Writes are dispatched on the view's capability; read-only views answer 405.

@router.post("/{view_name}")
def insert_into_view(view_name: str, values: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    return registry.insert_row(db, view_name, values)

@router.patch("/{view_name}/{key}")
def update_through_view(view_name: str, key: int, values: Dict[str, Any] = Body(...),
                        db: Session = Depends(get_db)):
    return registry.update_row(db, view_name, key, values)

@router.delete("/{view_name}/{key}")
def delete_through_view(view_name: str, key: int, db: Session = Depends(get_db)):
    registry.delete_row(db, view_name, key)
    return {"ok": True}
