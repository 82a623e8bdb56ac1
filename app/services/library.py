"""Domain operations of the library service.

Routes depend on the ``LibraryStore`` interface so that tests can swap in
a fake. ``SqlLibraryStore`` is the SQLAlchemy-backed implementation: each
write runs as one transaction, and borrow/return lock the rows they touch
so concurrent requests on the same book are serialized.
"""
from abc import ABC, abstractmethod
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import (
    BookNotFoundError,
    BookUnavailableError,
    BorrowingNotFoundError,
    StorageError,
)
from app.core.logging_config import logger
from app.models import models


class LibraryStore(ABC):

    @abstractmethod
    def list_users(self) -> List[models.User]:
        ...

    @abstractmethod
    def list_available_books(self) -> List[models.Book]:
        ...

    @abstractmethod
    def add_user(self, first_name: str, last_name: str) -> models.User:
        ...

    @abstractmethod
    def borrow_book(self, user_id: int, book_id: int) -> None:
        """Raises BookNotFoundError or BookUnavailableError."""

    @abstractmethod
    def return_book(self, user_id: int, book_id: int) -> None:
        """Raises BorrowingNotFoundError when the pair has no open borrowing."""


class SqlLibraryStore(LibraryStore):
    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[models.User]:
        try:
            return self.db.query(models.User).order_by(models.User.id).all()
        except SQLAlchemyError as exc:
            raise self._storage_error(exc) from exc

    def list_available_books(self) -> List[models.Book]:
        try:
            return self.db.query(models.Book).filter(models.Book.quantity > 0).order_by(models.Book.id).all()
        except SQLAlchemyError as exc:
            raise self._storage_error(exc) from exc

    def add_user(self, first_name: str, last_name: str) -> models.User:
        user = models.User(first_name=first_name, last_name=last_name)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as exc:
            raise self._storage_error(exc) from exc
        logger.info(f"Created user id={user.id}")
        return user

    def borrow_book(self, user_id: int, book_id: int) -> None:
        try:
            book = (
                self.db.query(models.Book)
                .filter(models.Book.id == book_id)
                .with_for_update()
                .first()
            )
            if book is None:
                self.db.rollback()
                raise BookNotFoundError()
            if book.quantity is None or book.quantity <= 0:
                self.db.rollback()
                raise BookUnavailableError()
            # guarded so a backend without row locks still never goes below zero
            updated = (
                self.db.query(models.Book)
                .filter(models.Book.id == book_id, models.Book.quantity > 0)
                .update({models.Book.quantity: models.Book.quantity - 1}, synchronize_session=False)
            )
            if updated == 0:
                self.db.rollback()
                raise BookUnavailableError()
            self.db.add(models.Borrowing(user_id=user_id, book_id=book_id))
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error(exc) from exc
        logger.info(f"User {user_id} borrowed book {book_id}")

    def return_book(self, user_id: int, book_id: int) -> None:
        try:
            # same lock order as borrow_book: the book row first
            book = (
                self.db.query(models.Book)
                .filter(models.Book.id == book_id)
                .with_for_update()
                .first()
            )
            if book is None:
                self.db.rollback()
                raise BorrowingNotFoundError()
            while True:
                # oldest open borrowing first
                borrowing = (
                    self.db.query(models.Borrowing)
                    .filter(models.Borrowing.user_id == user_id, models.Borrowing.book_id == book_id)
                    .order_by(models.Borrowing.borrow_date, models.Borrowing.id)
                    .first()
                )
                if borrowing is None:
                    self.db.rollback()
                    raise BorrowingNotFoundError()
                deleted = (
                    self.db.query(models.Borrowing)
                    .filter(models.Borrowing.id == borrowing.id)
                    .delete(synchronize_session=False)
                )
                # zero means a concurrent return took that row; pick the next one
                if deleted:
                    break
            self.db.query(models.Book).filter(models.Book.id == book_id).update(
                {models.Book.quantity: models.Book.quantity + 1}, synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error(exc) from exc
        logger.info(f"User {user_id} returned book {book_id}")

    def _storage_error(self, exc: SQLAlchemyError) -> StorageError:
        self.db.rollback()
        logger.error(f"Storage failure: {exc}")
        return StorageError(str(exc))
