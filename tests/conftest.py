import os
import threading

# keep the module-level engine off PostgreSQL while the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func
from sqlalchemy.orm import sessionmaker

from app.core.bootstrap import init_db
from app.core.database import get_db, make_engine
from app.core.errors import BookNotFoundError, BookUnavailableError, BorrowingNotFoundError, StorageError
from app.main import app
from app.api.routes import get_store
from app.models import models
from app.services.library import LibraryStore


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'library.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fake_store():
    return FakeLibraryStore()


@pytest.fixture
def fake_client(fake_store):
    app.dependency_overrides[get_store] = lambda: fake_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def book_by_title(session_factory, title):
    db = session_factory()
    try:
        return db.query(models.Book).filter(models.Book.title == title).one()
    finally:
        db.close()


def open_borrowings(session_factory, user_id, book_id):
    db = session_factory()
    try:
        return db.query(func.count(models.Borrowing.id)).filter(
            models.Borrowing.user_id == user_id, models.Borrowing.book_id == book_id
        ).scalar()
    finally:
        db.close()


class FakeLibraryStore(LibraryStore):
    """In-memory store for exercising the routes without a database."""

    def __init__(self):
        self.users = []
        self.books = {}
        self.borrowings = []
        self.fail_with = None
        self._lock = threading.Lock()

    def add_book(self, title, quantity):
        book = models.Book(id=len(self.books) + 1, title=title, quantity=quantity)
        self.books[book.id] = book
        return book

    def _check(self):
        if self.fail_with:
            raise StorageError(self.fail_with)

    def list_users(self):
        self._check()
        return list(self.users)

    def list_available_books(self):
        self._check()
        return list(self.books.values())

    def add_user(self, first_name, last_name):
        self._check()
        user = models.User(id=len(self.users) + 1, first_name=first_name, last_name=last_name)
        self.users.append(user)
        return user

    def borrow_book(self, user_id, book_id):
        self._check()
        with self._lock:
            book = self.books.get(book_id)
            if book is None:
                raise BookNotFoundError()
            if book.quantity <= 0:
                raise BookUnavailableError()
            book.quantity -= 1
            self.borrowings.append((user_id, book_id))

    def return_book(self, user_id, book_id):
        self._check()
        with self._lock:
            if (user_id, book_id) not in self.borrowings:
                raise BorrowingNotFoundError()
            self.borrowings.remove((user_id, book_id))
            self.books[book_id].quantity += 1
