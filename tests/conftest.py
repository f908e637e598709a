import pytest
from api import create_app
from models import storage


@pytest.fixture
def app(tmp_path, request):
    # Fresh SQLite file per test
    db_file = tmp_path / f"catalog_{request.node.name}.db"
    app = create_app("testing", DATABASE_URL=f"sqlite:///{db_file}")
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_author(client):
    def _make(name="Gabriel", last_name="García Márquez", country="Colombia", birth_date="1927-03-06"):
        resp = client.post(
            "/authors",
            json={"name": name, "lastName": last_name, "country": country, "birthDate": birth_date},
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _make


@pytest.fixture
def make_book(client):
    def _make(author_ids, title="Cien años de soledad", published_at="1967-05-30", **extra):
        payload = {"title": title, "publishedAt": published_at, "authorsId": list(author_ids)}
        payload.update(extra)
        resp = client.post("/books", json=payload)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _make

