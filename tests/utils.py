"""Helpers for asserting on the author_book join table directly."""
from sqlalchemy import select, func

from models import storage
from models.book import author_book


def association_pairs():
    session = storage.get_session()
    rows = session.execute(select(author_book.c.author_id, author_book.c.book_id)).all()
    return {(r.author_id, r.book_id) for r in rows}


def count_association_rows():
    session = storage.get_session()
    return session.execute(select(func.count()).select_from(author_book)).scalar_one()
