from sqlalchemy import Integer, String, insert, literal, select, union_all
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging_config import logger
from app.models import models

DEFAULT_BOOKS = [
    ("The Great Gatsby", 5),
    ("1984", 3),
    ("To Kill a Mockingbird", 7),
    ("The Catcher in the Rye", 0),
    ("Pride and Prejudice", 10),
]


def create_tables(engine: Engine) -> None:
    tables = [models.User.__table__, models.Book.__table__, models.Borrowing.__table__]
    for table in tables:
        table.create(bind=engine, checkfirst=True)


def seed_books(engine: Engine, books=DEFAULT_BOOKS) -> int:
    """Insert the titles not yet present; returns how many were added.

    One INSERT ... SELECT ... WHERE NOT EXISTS, so processes starting
    together cannot both add the same title.
    """
    new_books = union_all(
        *[select(literal(title, String).label("title"), literal(quantity, Integer).label("quantity"))
          for title, quantity in books]
    ).subquery("new_books")
    already_there = select(models.Book.id).where(models.Book.title == new_books.c.title)
    stmt = insert(models.Book).from_select(
        ["title", "quantity"],
        select(new_books.c.title, new_books.c.quantity).where(~already_there.exists()),
    )
    with engine.begin() as conn:
        return conn.execute(stmt).rowcount


def init_db(engine: Engine) -> None:
    """Ensure the schema exists and seed default inventory.

    Table creation errors propagate and abort startup; a failed seed is
    only logged.
    """
    logger.info("Creating database tables (if not present)...")
    create_tables(engine)
    try:
        added = seed_books(engine)
    except SQLAlchemyError as exc:
        logger.warning(f"Seeding default books failed: {exc}")
        return
    logger.info(f"Seeded {added} default book(s)")
