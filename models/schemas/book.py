from marshmallow import Schema, fields, validate, post_load

from models.schemas.common import InputSchema, MAX_STRING, not_blank, unique_ids


class BookBaseSchema(InputSchema):
    title = fields.String(required=True, validate=[validate.Length(max=MAX_STRING), not_blank])
    published_at = fields.Date(data_key="publishedAt", required=True)
    edition = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=MAX_STRING))
    cover_url = fields.URL(data_key="coverUrl", allow_none=True, load_default=None)


class BookCreateSchema(BookBaseSchema):
    # At least one author; ids are checked against the authors table inside the create transaction
    author_ids = fields.List(
        fields.String(),
        data_key="authorsId",
        required=True,
        validate=validate.Length(min=1, error="At least one author is required."),
    )

    @post_load
    def _dedupe(self, data, **kwargs):
        data["author_ids"] = unique_ids(data["author_ids"])
        return data


class BookUpdateSchema(BookBaseSchema):
    # Update takes the full author set under "authors" and syncs to it
    author_ids = fields.List(
        fields.String(),
        data_key="authors",
        required=True,
        validate=validate.Length(min=1, error="At least one author is required."),
    )

    @post_load
    def _dedupe(self, data, **kwargs):
        data["author_ids"] = unique_ids(data["author_ids"])
        return data


class BookAuthorSchema(Schema):
    id = fields.String()
    name = fields.String()
    lastName = fields.String(attribute="last_name")
    fullName = fields.String(attribute="full_name")
    country = fields.String()
    birthDate = fields.Date(attribute="birth_date")
    deletedAt = fields.DateTime(attribute="deleted_at", allow_none=True)


class BookOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    publishedAt = fields.Date(attribute="published_at")
    edition = fields.String(allow_none=True)
    coverUrl = fields.String(attribute="cover_url", allow_none=True)
    createdAt = fields.DateTime(attribute="created_at")
    updatedAt = fields.DateTime(attribute="updated_at")
    deletedAt = fields.DateTime(attribute="deleted_at", allow_none=True)
    authors = fields.Nested(BookAuthorSchema, many=True)


class BookDetailOutSchema(BookOutSchema):
    # Detail view only shows authors that are not soft-deleted
    authors = fields.Nested(BookAuthorSchema, many=True, attribute="active_authors")
