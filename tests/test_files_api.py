from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import select

from app.models.file import FileRecord


def _upload(client, headers, name="hello.txt", content=b"0123456789", mime="text/plain"):
    return client.post("/api/files/upload", headers=headers, files={"file": (name, content, mime)})


def test_example_flow(client):
    register = client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})
    assert register.status_code == 200
    owner_headers = {"Authorization": f"Bearer {register.json()['token']}"}

    assert client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong"}).status_code == 401

    upload = _upload(client, owner_headers)
    assert upload.status_code == 200, upload.text
    record = upload.json()
    assert record["size_bytes"] == 10
    assert record["filename_original"] == "hello.txt"
    assert record["mime"] == "text/plain"
    assert record["owner_id"] == register.json()["user"]["id"]
    assert "filename_stored" not in record

    other = client.post("/api/auth/register", json={"email": "b@x.com", "password": "p"})
    other_headers = {"Authorization": f"Bearer {other.json()['token']}"}
    assert client.get(f"/api/files/{record['id']}/download", headers=other_headers).status_code == 403


def test_upload_requires_file(client, register):
    _, headers = register()
    response = client.post("/api/files/upload", headers=headers, data={"note": "nothing attached"})
    assert response.status_code == 400


def test_upload_requires_auth(client):
    response = _upload(client, {})
    assert response.status_code == 401


def test_upload_too_large_leaves_nothing_behind(client, register, settings, db):
    _, headers = register()
    response = _upload(client, headers, content=b"x" * (1024 * 1024 + 1))
    assert response.status_code == 413
    assert db.scalars(select(FileRecord)).all() == []
    assert list(Path(settings.upload_dir).iterdir()) == []


def test_list_returns_only_callers_files_newest_first(client, register):
    _, alice = register(email="alice@example.com")
    _, bob = register(email="bob@example.com")
    first = _upload(client, alice, name="first.txt").json()
    second = _upload(client, alice, name="second.txt").json()
    _upload(client, bob, name="bob.txt")

    listing = client.get("/api/files", headers=alice)
    assert listing.status_code == 200
    assert [item["id"] for item in listing.json()] == [second["id"], first["id"]]


def test_download_streams_original_name(client, register):
    _, headers = register()
    record = _upload(client, headers, name="report.csv", content=b"a,b\n1,2\n", mime="text/csv").json()
    response = client.get(f"/api/files/{record['id']}/download", headers=headers)
    assert response.status_code == 200
    assert response.content == b"a,b\n1,2\n"
    assert 'filename="report.csv"' in response.headers["content-disposition"]


def test_download_unknown_file_is_not_found(client, register):
    _, headers = register()
    assert client.get("/api/files/does-not-exist/download", headers=headers).status_code == 404


def test_download_with_missing_blob_is_gone(client, register, settings, db):
    _, headers = register()
    record = _upload(client, headers).json()
    stored = db.scalar(select(FileRecord).where(FileRecord.id == record["id"]))
    (Path(settings.upload_dir) / stored.filename_stored).unlink()

    response = client.get(f"/api/files/{record['id']}/download", headers=headers)
    assert response.status_code == 410


def test_delete_removes_row_and_blob(client, register, settings, db):
    _, headers = register()
    record = _upload(client, headers).json()
    stored = db.scalar(select(FileRecord).where(FileRecord.id == record["id"]))
    blob_path = Path(settings.upload_dir) / stored.filename_stored
    assert blob_path.exists()

    response = client.delete(f"/api/files/{record['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"deleted": True}
    assert not blob_path.exists()
    assert client.get(f"/api/files/{record['id']}/download", headers=headers).status_code == 404


def test_delete_succeeds_when_blob_already_gone(client, register, settings):
    _, headers = register()
    record = _upload(client, headers).json()
    for path in Path(settings.upload_dir).iterdir():
        path.unlink()
    assert client.delete(f"/api/files/{record['id']}", headers=headers).status_code == 200


def test_delete_checks_existence_then_ownership(client, register):
    _, alice = register(email="alice@example.com")
    _, bob = register(email="bob@example.com")
    record = _upload(client, alice).json()

    assert client.delete("/api/files/missing", headers=bob).status_code == 404
    assert client.delete(f"/api/files/{record['id']}", headers=bob).status_code == 403
    assert client.get("/api/files", headers=alice).json()[0]["id"] == record["id"]


def test_unexpected_failure_is_opaque(application, monkeypatch):
    def _boom(db, owner_id):
        raise RuntimeError("database exploded at /var/lib/secret")

    with TestClient(application, raise_server_exceptions=False) as client:
        response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "p"})
        headers = {"Authorization": f"Bearer {response.json()['token']}"}
        monkeypatch.setattr("app.services.files.list_files", _boom)
        failed = client.get("/api/files", headers=headers)
    assert failed.status_code == 500
    assert failed.json() == {"detail": "Internal server error"}
