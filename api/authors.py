from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, abort
from sqlalchemy import func

from models import storage
from models.author import Author
from models.book import author_book
from models.schemas.author import (
    AuthorInSchema,
    AuthorListOutSchema,
    AuthorDetailOutSchema,
)

logger = logging.getLogger(__name__)

bp = Blueprint("authors", __name__)

in_schema = AuthorInSchema()
out_list_schema = AuthorListOutSchema(many=True)
out_detail_schema = AuthorDetailOutSchema()


def include_deleted_requested() -> bool:
    return request.args.get("include_deleted", "false").lower() in ("1", "true", "yes")


def get_author_or_404(author_id: str, include_deleted: bool = False) -> Author:
    a = storage.get(Author, author_id, include_deleted=include_deleted)
    if not a:
        abort(404)
    return a


def apply_fields(author: Author, data: dict) -> None:
    author.name = data["name"]
    author.last_name = data["last_name"]
    author.country = data["country"]
    author.birth_date = data["birth_date"]


@bp.get("/authors")
def list_authors():
    """
    List authors, newest first, with their book counts
    ---
    tags: [Authors]
    parameters:
      - in: query
        name: include_deleted
        type: boolean
        default: false
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    query = (
        session.query(Author, func.count(author_book.c.book_id))
        .outerjoin(author_book, author_book.c.author_id == Author.id)
        .group_by(Author.id)
    )
    if not include_deleted_requested():
        query = query.filter(Author.deleted_at.is_(None))

    authors = []
    for author, books_count in query.order_by(Author.created_at.desc()).all():
        author.books_count = books_count
        authors.append(author)
    return jsonify({"data": out_list_schema.dump(authors)})


@bp.post("/authors")
def create_author():
    """
    Create an author
    ---
    tags: [Authors]
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, lastName, country, birthDate]
          properties:
            name: { type: string, maxLength: 255 }
            lastName: { type: string, maxLength: 255 }
            country: { type: string, maxLength: 255 }
            birthDate: { type: string, format: date }
    responses:
      201: { description: Created }
      422: { description: Validation error }
    """
    data = in_schema.load(request.get_json(silent=True) or {})
    a = Author()
    apply_fields(a, data)
    storage.new(a)
    storage.save()
    logger.info("Author created: %s (%s)", a.id, a.full_name)
    return jsonify({"data": out_detail_schema.dump(a), "message": "Author created successfully"}), 201


@bp.get("/authors/<author_id>")
def get_author(author_id: str):
    """
    Get an author with the books credited to them (soft-deleted books are left out)
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
      - in: query
        name: include_deleted
        type: boolean
        default: false
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    a = get_author_or_404(author_id, include_deleted=include_deleted_requested())
    return jsonify({"data": out_detail_schema.dump(a)})


@bp.route("/authors/<author_id>", methods=["PUT", "PATCH"])
def update_author(author_id: str):
    """
    Update an author (all fields are replaced)
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, lastName, country, birthDate]
          properties:
            name: { type: string, maxLength: 255 }
            lastName: { type: string, maxLength: 255 }
            country: { type: string, maxLength: 255 }
            birthDate: { type: string, format: date }
    responses:
      200: { description: OK }
      404: { description: Not found }
      422: { description: Validation error }
    """
    a = get_author_or_404(author_id)
    data = in_schema.load(request.get_json(silent=True) or {})
    apply_fields(a, data)
    a.save()
    return jsonify({"data": out_detail_schema.dump(a), "message": "Author updated successfully"})


@bp.delete("/authors/<author_id>")
def delete_author(author_id: str):
    """
    Soft delete an author (sets deleted_at; book links are kept)
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Not found }
    """
    a = get_author_or_404(author_id)
    a.delete()
    logger.info("Author soft-deleted: %s", a.id)
    return jsonify({"message": "Author deleted successfully"})
