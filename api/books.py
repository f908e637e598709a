from __future__ import annotations

import logging
from typing import List

from flask import Blueprint, request, jsonify, abort, redirect, url_for
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models import storage
from models.book import Book
from models.author import Author
from models.schemas.book import (
    BookCreateSchema,
    BookUpdateSchema,
    BookOutSchema,
    BookDetailOutSchema,
    BookAuthorSchema,
)
from .errors import PersistenceError

logger = logging.getLogger(__name__)

bp = Blueprint("books", __name__)

# Schemas
book_create_schema = BookCreateSchema()
book_update_schema = BookUpdateSchema()
book_out_schema = BookOutSchema()
book_detail_schema = BookDetailOutSchema()
books_out_schema = BookOutSchema(many=True)
available_authors_schema = BookAuthorSchema(many=True)


def include_deleted_requested() -> bool:
    return request.args.get("include_deleted", "false").lower() in ("1", "true", "yes")


def get_book_or_404(book_id: str, include_deleted: bool = False) -> Book:
    b = storage.get(Book, book_id, include_deleted=include_deleted)
    if not b:
        abort(404)
    return b


def load_authors(session, author_ids: List[str], field: str) -> List[Author]:
    """
    Resolve ids to Author rows, soft-deleted ones included.
    Unknown ids raise a ValidationError keyed by field and list index.
    """
    found = {a.id: a for a in session.query(Author).filter(Author.id.in_(author_ids)).all()}
    missing = {
        index: [f"Author '{author_id}' does not exist."]
        for index, author_id in enumerate(author_ids)
        if author_id not in found
    }
    if missing:
        raise ValidationError({field: missing})
    return [found[author_id] for author_id in author_ids]


def apply_fields(book: Book, data: dict) -> None:
    book.title = data["title"]
    book.published_at = data["published_at"]
    book.edition = data.get("edition")
    book.cover_url = data.get("cover_url")


@bp.get("/books")
def list_books():
    """
    List books with all their authors (soft-deleted authors included)
    ---
    tags:
      - Books
    parameters:
      - in: query
        name: include_deleted
        type: boolean
        default: false
        description: "Also list soft-deleted books"
    responses:
      200:
        description: >
          List of books. meta.authorsExists tells whether any author was ever
          created; meta.availableAuthors lists the active authors a new book
          can be attached to.
    """
    session = storage.get_session()
    query = session.query(Book).options(selectinload(Book.authors))
    if not include_deleted_requested():
        query = query.filter(Book.deleted_at.is_(None))
    rows = query.order_by(Book.created_at.desc()).all()

    authors_exist = session.query(Author.id).first() is not None
    available = (
        session.query(Author)
        .filter(Author.deleted_at.is_(None))
        .order_by(Author.name.asc(), Author.last_name.asc())
        .all()
    )

    return jsonify(
        {
            "data": books_out_schema.dump(rows),
            "meta": {
                "authorsExists": authors_exist,
                "availableAuthors": available_authors_schema.dump(available),
            },
        }
    )


@bp.post("/books")
def create_book():
    """
    Create a new book and attach its authors (one transaction)
    ---
    tags:
      - Books
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, publishedAt, authorsId]
          properties:
            title: { type: string, maxLength: 255 }
            publishedAt: { type: string, format: date }
            edition: { type: string, maxLength: 255 }
            coverUrl: { type: string, format: uri }
            authorsId:
              type: array
              minItems: 1
              items: { type: string }
    responses:
      201:
        description: Created
      422:
        description: Validation error (nothing is stored)
      500:
        description: Persistence error (rolled back)
    """
    session = storage.get_session()
    data = book_create_schema.load(request.get_json(silent=True) or {})
    logger.debug("Book creation data: %s", data)

    try:
        authors = load_authors(session, data["author_ids"], field="authorsId")
        b = Book()
        apply_fields(b, data)
        storage.new(b)
        session.flush()
        attached = b.attach_authors(authors)
        storage.save()
    except ValidationError as err:
        storage.rollback()
        logger.info("Book creation rejected: %s", err.messages)
        raise
    except SQLAlchemyError as exc:
        storage.rollback()
        logger.exception("Error creating book %r with authors %s", data.get("title"), data.get("author_ids"))
        raise PersistenceError("The book could not be created. Please try again later.") from exc

    logger.info("Book created: %s, authors attached: %s", b.id, attached)
    return jsonify({"data": book_out_schema.dump(b), "message": "Book created successfully"}), 201


@bp.get("/books/<book_id>")
def get_book(book_id: str):
    """
    Get a single book with its authors (soft-deleted authors are left out)
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
      - in: query
        name: include_deleted
        type: boolean
        default: false
    responses:
      200:
        description: Book found
      404:
        description: Not found
    """
    b = get_book_or_404(book_id, include_deleted=include_deleted_requested())
    return jsonify({"data": book_detail_schema.dump(b)})


@bp.route("/books/<book_id>", methods=["PUT", "PATCH"])
def update_book(book_id: str):
    """
    Update a book and sync its authors to exactly the given list
    ---
    tags:
      - Books
    consumes:
      - application/json
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, publishedAt, authors]
          properties:
            title: { type: string, maxLength: 255 }
            publishedAt: { type: string, format: date }
            edition: { type: string, maxLength: 255 }
            coverUrl: { type: string, format: uri }
            authors:
              type: array
              minItems: 1
              items: { type: string }
    responses:
      200:
        description: Updated
      404:
        description: Not found
      422:
        description: Validation error
    """
    session = storage.get_session()
    b = get_book_or_404(book_id)
    data = book_update_schema.load(request.get_json(silent=True) or {})
    authors = load_authors(session, data["author_ids"], field="authors")

    try:
        apply_fields(b, data)
        changes = b.sync_authors(authors)
        storage.save()
    except SQLAlchemyError as exc:
        storage.rollback()
        logger.exception("Error updating book %s", book_id)
        raise PersistenceError("The book could not be updated. Please try again later.") from exc

    logger.info("Book updated: %s, authors %s", b.id, changes)
    return jsonify({"data": book_out_schema.dump(b), "message": "Book updated successfully"})


@bp.delete("/books/<book_id>")
def delete_book(book_id: str):
    """
    Soft delete a book, then redirect to the book list
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      303:
        description: Deleted; redirects to /books
      404:
        description: Not found
    """
    b = get_book_or_404(book_id)
    # Author links stay in place; default reads skip the book
    b.delete()
    logger.info("Book soft-deleted: %s", b.id)
    return redirect(url_for("books.list_books"), code=303)
