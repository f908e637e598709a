from marshmallow import Schema, fields, validate

from models.schemas.common import InputSchema, MAX_STRING, not_blank

DISPLAY_DATE = "%d/%m/%Y"

_required_string = dict(
    required=True,
    validate=[validate.Length(max=MAX_STRING), not_blank],
)


class AuthorInSchema(InputSchema):
    """Create and update share one schema: updates replace all four fields."""

    name = fields.String(**_required_string)
    last_name = fields.String(data_key="lastName", **_required_string)
    country = fields.String(**_required_string)
    birth_date = fields.Date(data_key="birthDate", required=True)


class AuthorOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    lastName = fields.String(attribute="last_name")
    fullName = fields.String(attribute="full_name")
    country = fields.String()
    birthDate = fields.Date(attribute="birth_date")
    formattedBirthDate = fields.Date(attribute="birth_date", format=DISPLAY_DATE, dump_only=True)
    registrationDate = fields.DateTime(attribute="created_at", format=DISPLAY_DATE, dump_only=True)
    deletedAt = fields.DateTime(attribute="deleted_at", allow_none=True)


class AuthorListOutSchema(AuthorOutSchema):
    # filled in by the list query (grouped count over the join table)
    booksCount = fields.Integer(attribute="books_count")


class AuthorBookSchema(Schema):
    id = fields.String()
    title = fields.String()
    publishedAt = fields.Date(attribute="published_at")
    edition = fields.String(allow_none=True)


class AuthorDetailOutSchema(AuthorOutSchema):
    # Detail view only shows books that are not soft-deleted
    books = fields.Nested(AuthorBookSchema, many=True, attribute="active_books")
    booksCount = fields.Method("get_books_count")

    def get_books_count(self, obj):
        return len(obj.active_books)
