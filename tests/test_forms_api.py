import json
from pathlib import Path

from sqlalchemy import select

from app.models.file import FileRecord
from app.models.submission import FormSubmission

CONTACT_SCHEMA = {"fields": [{"name": "email", "type": "email"}, {"name": "message", "type": "text"}]}


def _create_form(client, headers, slug="contact", name="Contact us", schema=CONTACT_SCHEMA):
    response = client.post("/api/forms", headers=headers, json={"name": name, "slug": slug, "schema": schema})
    assert response.status_code == 200, response.text
    return response.json()


def test_create_form(client, register):
    user, headers = register()
    form = _create_form(client, headers)
    assert form["slug"] == "contact"
    assert form["schema"] == CONTACT_SCHEMA
    assert form["owner_id"] == user["id"]


def test_create_form_requires_fields(client, register):
    _, headers = register()
    assert client.post("/api/forms", headers=headers, json={"name": "x", "slug": "x"}).status_code == 400
    assert client.post("/api/forms", headers=headers, json={"slug": "x", "schema": {}}).status_code == 400
    assert client.post("/api/forms", headers=headers, json={"name": "x", "slug": "x", "schema": None}).status_code == 400


def test_create_form_requires_auth(client):
    response = client.post("/api/forms", json={"name": "x", "slug": "x", "schema": {}})
    assert response.status_code == 401


def test_duplicate_slug_is_rejected_across_users(client, register):
    _, alice = register(email="alice@example.com")
    _, bob = register(email="bob@example.com")
    _create_form(client, alice, slug="shared")
    response = client.post("/api/forms", headers=bob, json={"name": "Mine", "slug": "shared", "schema": {}})
    assert response.status_code == 409
    assert response.json()["detail"] == "Slug already exists"


def test_list_forms_is_scoped_and_newest_first(client, register):
    _, alice = register(email="alice@example.com")
    _, bob = register(email="bob@example.com")
    older = _create_form(client, alice, slug="one")
    newer = _create_form(client, alice, slug="two")
    _create_form(client, bob, slug="three")

    listing = client.get("/api/forms", headers=alice).json()
    assert [form["id"] for form in listing] == [newer["id"], older["id"]]


def test_submit_json_body_without_auth(client, register):
    _, headers = register()
    _create_form(client, headers)
    response = client.post("/api/forms/contact/submit", json={"email": "visitor@example.com", "message": "hi"})
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    assert body["submission"]["data"] == {"email": "visitor@example.com", "message": "hi"}
    assert body["submission"]["submitter_email"] == "visitor@example.com"
    assert body["submission"]["files"] == []


def test_submit_is_not_validated_against_schema(client, register):
    _, headers = register()
    _create_form(client, headers)
    response = client.post("/api/forms/contact/submit", json={"unexpected": [1, 2, 3]})
    assert response.status_code == 200
    assert response.json()["submission"]["data"] == {"unexpected": [1, 2, 3]}
    assert response.json()["submission"]["submitter_email"] is None


def test_submit_multipart_with_data_field_and_attachments(client, register, db):
    _, headers = register()
    _create_form(client, headers)
    response = client.post(
        "/api/forms/contact/submit",
        data={"data": json.dumps({"email": "visitor@example.com", "rating": 5})},
        files=[
            ("resume", ("cv.pdf", b"%PDF-1.4", "application/pdf")),
            ("photo", ("me.png", b"\x89PNG", "image/png")),
        ],
    )
    assert response.status_code == 200, response.text
    submission = response.json()["submission"]
    assert submission["data"] == {"email": "visitor@example.com", "rating": 5}
    assert [entry["field_name"] for entry in submission["files"]] == ["resume", "photo"]

    records = db.scalars(select(FileRecord)).all()
    assert {record.id for record in records} == {entry["file_id"] for entry in submission["files"]}
    assert all(record.owner_id is None for record in records)
    assert {record.filename_original for record in records} == {"cv.pdf", "me.png"}


def test_submit_multipart_without_data_field_uses_text_fields(client, register):
    _, headers = register()
    _create_form(client, headers)
    response = client.post("/api/forms/contact/submit", data={"email": "v@example.com", "message": "hello"})
    assert response.status_code == 200
    assert response.json()["submission"]["data"] == {"email": "v@example.com", "message": "hello"}


def test_submit_rejects_undecodable_data_field(client, register):
    _, headers = register()
    _create_form(client, headers)
    response = client.post("/api/forms/contact/submit", data={"data": "{not json"})
    assert response.status_code == 400


def test_submit_to_unknown_slug_is_not_found_and_stores_nothing(client, settings, db):
    plain = client.post("/api/forms/missing/submit", json={"email": "v@example.com"})
    with_files = client.post(
        "/api/forms/missing/submit",
        files=[("doc", ("a.txt", b"abc", "text/plain"))],
    )
    assert plain.status_code == 404
    assert with_files.status_code == 404
    assert db.scalars(select(FileRecord)).all() == []
    upload_dir = Path(settings.upload_dir)
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_submissions_are_owner_only_and_newest_first(client, register):
    _, alice = register(email="alice@example.com")
    _, bob = register(email="bob@example.com")
    form = _create_form(client, alice)
    first = client.post("/api/forms/contact/submit", json={"n": 1}).json()["submission"]
    second = client.post("/api/forms/contact/submit", json={"n": 2}).json()["submission"]

    listing = client.get(f"/api/forms/{form['id']}/submissions", headers=alice)
    assert listing.status_code == 200
    assert [item["id"] for item in listing.json()] == [second["id"], first["id"]]

    assert client.get(f"/api/forms/{form['id']}/submissions", headers=bob).status_code == 403
    assert client.get("/api/forms/nope/submissions", headers=bob).status_code == 404
    assert client.get(f"/api/forms/{form['id']}/submissions").status_code == 401


def test_delete_form_removes_submissions(client, register, db):
    _, alice = register(email="alice@example.com")
    _, bob = register(email="bob@example.com")
    form = _create_form(client, alice)
    client.post("/api/forms/contact/submit", json={"n": 1})
    client.post("/api/forms/contact/submit", json={"n": 2})

    assert client.delete(f"/api/forms/{form['id']}", headers=bob).status_code == 403
    response = client.delete(f"/api/forms/{form['id']}", headers=alice)
    assert response.status_code == 200
    assert response.json() == {"deleted": True}

    assert db.scalars(select(FormSubmission)).all() == []
    assert client.get(f"/api/forms/{form['id']}/submissions", headers=alice).status_code == 404
    assert client.post("/api/forms/contact/submit", json={"n": 3}).status_code == 404
