from datetime import date, datetime

from models import storage
from models.author import Author
from models.schemas.author import AuthorListOutSchema, AuthorDetailOutSchema


def test_create_author_lists_derived_fields(client, make_author):
    created = make_author()
    assert created["fullName"] == "Gabriel García Márquez"

    resp = client.get("/authors")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert len(data) == 1
    author = data[0]
    assert author["id"] == created["id"]
    assert author["fullName"] == "Gabriel García Márquez"
    assert author["birthDate"] == "1927-03-06"
    assert author["formattedBirthDate"] == "06/03/1927"
    assert author["booksCount"] == 0
    assert author["deletedAt"] is None
    assert storage.count(Author) == 1


def test_create_author_returns_message(client):
    resp = client.post(
        "/authors",
        json={"name": "Isabel", "lastName": "Allende", "country": "Chile", "birthDate": "1942-08-02"},
    )
    body = resp.get_json()
    assert resp.status_code == 201
    assert body["message"] == "Author created successfully"
    assert body["data"]["books"] == []
    assert body["data"]["booksCount"] == 0


def test_create_author_missing_fields(client):
    resp = client.post("/authors", json={"name": "Solo"})
    assert resp.status_code == 422
    body = resp.get_json()
    assert body["error"] == "VALIDATION_ERROR"
    assert set(body["details"]) == {"lastName", "country", "birthDate"}
    # Submitted input is echoed back so a form can be refilled
    assert body["input"] == {"name": "Solo"}
    assert storage.count(Author) == 0


def test_create_author_rejects_long_and_blank_values(client):
    resp = client.post(
        "/authors",
        json={"name": "x" * 256, "lastName": "   ", "country": "Peru", "birthDate": "1936-03-28"},
    )
    assert resp.status_code == 422
    details = resp.get_json()["details"]
    assert "name" in details
    assert "lastName" in details
    assert "country" not in details


def test_create_author_rejects_invalid_date(client):
    resp = client.post(
        "/authors",
        json={"name": "Mario", "lastName": "Vargas Llosa", "country": "Peru", "birthDate": "1936-13-45"},
    )
    assert resp.status_code == 422
    assert "birthDate" in resp.get_json()["details"]


def test_list_authors_newest_first(client, make_author):
    first = make_author(name="Jorge Luis", last_name="Borges", country="Argentina", birth_date="1899-08-24")
    second = make_author(name="Julio", last_name="Cortázar", country="Argentina", birth_date="1914-08-26")

    ids = [a["id"] for a in client.get("/authors").get_json()["data"]]
    assert ids == [second["id"], first["id"]]


def test_get_author_with_books(client, make_author, make_book):
    author = make_author()
    book = make_book([author["id"]], edition="1st")

    resp = client.get(f"/authors/{author['id']}")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["booksCount"] == 1
    assert data["books"] == [
        {"id": book["id"], "title": "Cien años de soledad", "publishedAt": "1967-05-30", "edition": "1st"}
    ]


def test_get_author_not_found(client):
    resp = client.get("/authors/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "NOT_FOUND"


def test_update_author_replaces_fields(client, make_author):
    author = make_author()
    payload = {"name": "Gabo", "lastName": "Márquez", "country": "México", "birthDate": "1927-03-06"}

    resp = client.put(f"/authors/{author['id']}", json=payload)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["fullName"] == "Gabo Márquez"

    resp = client.patch(f"/authors/{author['id']}", json={**payload, "country": "Colombia"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["country"] == "Colombia"


def test_update_author_requires_all_fields(client, make_author):
    author = make_author()
    resp = client.patch(f"/authors/{author['id']}", json={"name": "Gabo"})
    assert resp.status_code == 422
    assert client.get(f"/authors/{author['id']}").get_json()["data"]["name"] == "Gabriel"


def test_update_missing_author(client):
    payload = {"name": "A", "lastName": "B", "country": "C", "birthDate": "2000-01-01"}
    assert client.put("/authors/nope", json=payload).status_code == 404


def test_delete_author_is_soft(client, make_author):
    author = make_author()

    resp = client.delete(f"/authors/{author['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Author deleted successfully"

    assert client.get("/authors").get_json()["data"] == []
    assert client.get(f"/authors/{author['id']}").status_code == 404

    # Row is still there and reachable explicitly
    resp = client.get(f"/authors/{author['id']}?include_deleted=true")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["deletedAt"] is not None
    listed = client.get("/authors?include_deleted=true").get_json()["data"]
    assert [a["id"] for a in listed] == [author["id"]]


def test_delete_author_twice_is_not_found(client, make_author):
    author = make_author()
    assert client.delete(f"/authors/{author['id']}").status_code == 200
    assert client.delete(f"/authors/{author['id']}").status_code == 404


def test_output_schemas_dump_display_dates():
    author = Author(name="Jorge Luis", last_name="Borges", country="Argentina", birth_date=date(1899, 8, 24))
    author.created_at = datetime(2024, 1, 15, 10, 30)
    author.books_count = 0

    dumped = AuthorListOutSchema(many=True).dump([author])[0]
    assert dumped["birthDate"] == "1899-08-24"
    assert dumped["formattedBirthDate"] == "24/08/1899"
    assert dumped["registrationDate"] == "15/01/2024"
    assert AuthorDetailOutSchema().dump(author)["booksCount"] == 0


def test_get_author_leaves_out_soft_deleted_books(client, make_author, make_book):
    author = make_author()
    live = make_book([author["id"]], title="Live")
    gone = make_book([author["id"]], title="Gone")
    client.delete(f"/books/{gone['id']}")

    data = client.get(f"/authors/{author['id']}").get_json()["data"]
    assert [b["id"] for b in data["books"]] == [live["id"]]
    assert data["booksCount"] == 1

    # The list still counts every linked book
    assert client.get("/authors").get_json()["data"][0]["booksCount"] == 2
