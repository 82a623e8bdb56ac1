from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.errors import ConflictError, NoBooksAvailableError, NotFoundError
from app.services.library import LibraryStore, SqlLibraryStore
from app.schemas import schemas

router = APIRouter()

def get_store(db: Session = Depends(get_db)) -> LibraryStore:
    return SqlLibraryStore(db)

@router.get("/displayUsers", response_model=List[schemas.UserOut])
def display_users(store: LibraryStore = Depends(get_store)):
    return store.list_users()

@router.get("/displayBooks", response_model=List[schemas.BookOut])
def display_books(store: LibraryStore = Depends(get_store)):
    books = [b for b in store.list_available_books() if b.quantity > 0]
    if not books:
        raise HTTPException(status_code=409, detail=NoBooksAvailableError.default_message)
    return books

@router.post("/addUser", response_model=schemas.UserOut, status_code=201)
def add_user(user_in: schemas.UserCreate, store: LibraryStore = Depends(get_store)):
    return store.add_user(user_in.first_name, user_in.last_name)

@router.post("/borrowBook", response_model=schemas.StatusOut)
def borrow_book(req: schemas.BorrowRequest, store: LibraryStore = Depends(get_store)):
    try:
        store.borrow_book(req.user_id, req.book_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return {"status": "book borrowed"}

@router.post("/returnBook", response_model=schemas.StatusOut)
def return_book(req: schemas.BorrowRequest, store: LibraryStore = Depends(get_store)):
    try:
        store.return_book(req.user_id, req.book_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return {"status": "book returned"}
