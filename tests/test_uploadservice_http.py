import asyncio
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient

from authupload.apigateway.errors import install_exception_handlers
from authupload.objectstorage import InMemoryObjectStore, ObjectStoreClient
from authupload.uploadservice import InMemoryFileRepo, UploadService, set_upload_service, upload_router


def make_app():
    store = InMemoryObjectStore(bucket="test", public_base_url="https://cdn.example.com")
    svc = UploadService(ObjectStoreClient(store, "memory"), InMemoryFileRepo())
    set_upload_service(svc)
    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(upload_router)
    return app, store


def test_upload_single_file():
    app, _ = make_app()
    client = TestClient(app)
    res = client.post("/upload", files={"file": ("cat.png", b"\x89PNG data", "image/png")}, data={"folder": "pets"})
    assert res.status_code == 201
    body = res.json()
    assert body["originalName"] == "cat.png"
    assert body["mimeType"] == "image/png"
    assert body["size"] == 9
    assert body["key"].startswith("pets/")
    assert {"id", "filename", "url", "createdAt", "updatedAt"} <= set(body)


def test_upload_without_file_is_400():
    app, _ = make_app()
    client = TestClient(app)
    res = client.post("/upload", data={"folder": "pets"})
    assert res.status_code == 400
    assert res.json()["message"] == "No file uploaded"


def test_upload_rejects_disallowed_type():
    app, store = make_app()
    client = TestClient(app)
    res = client.post("/upload", files={"file": ("a.sh", b"echo", "text/x-shellscript")})
    assert res.status_code == 400
    assert "not allowed" in res.json()["message"]
    assert asyncio.run(store.list()) == []


def test_upload_multiple():
    app, _ = make_app()
    client = TestClient(app)
    res = client.post(
        "/upload/multiple",
        files=[
            ("files", ("a.png", b"aaa", "image/png")),
            ("files", ("b.pdf", b"%PDF", "application/pdf")),
        ],
    )
    assert res.status_code == 201
    assert sorted(r["originalName"] for r in res.json()) == ["a.png", "b.pdf"]


def test_presigned_then_confirm_flow():
    app, store = make_app()
    client = TestClient(app)
    res = client.post("/upload/presigned", json={"filename": "doc.pdf", "mimeType": "application/pdf"})
    assert res.status_code == 200
    presigned = res.json()
    assert presigned["expiresIn"] == 3600
    key = presigned["key"]

    res = client.post("/upload/confirm", json={"key": key, "originalName": "doc.pdf",
                                               "mimeType": "application/pdf", "size": 4})
    assert res.status_code == 400
    assert res.json()["message"] == "File not found in storage"

    # client uploads straight to the bucket
    asyncio.run(store.put(key, b"%PDF", "application/pdf"))

    res = client.post("/upload/confirm", json={"key": key, "originalName": "doc.pdf",
                                               "mimeType": "application/pdf", "size": 4})
    assert res.status_code == 201
    assert res.json()["key"] == key


def test_list_get_delete():
    app, _ = make_app()
    client = TestClient(app)
    ids = [
        client.post("/upload", files={"file": (f"{i}.png", b"png", "image/png")}).json()["id"]
        for i in range(3)
    ]

    res = client.get("/upload", params={"page": 1, "limit": 2})
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 3 and body["pages"] == 2
    assert [f["id"] for f in body["files"]] == [ids[2], ids[1]]

    assert client.get(f"/upload/{ids[0]}").json()["id"] == ids[0]
    assert client.delete(f"/upload/{ids[0]}").status_code == 204
    res = client.get(f"/upload/{ids[0]}")
    assert res.status_code == 404
    assert res.json()["message"] == f"File with ID {ids[0]} not found"
    assert client.delete(f"/upload/{uuid.uuid4()}").status_code == 404


def test_invalid_ids_and_paging_are_400():
    app, _ = make_app()
    client = TestClient(app)
    assert client.get("/upload/not-a-uuid").status_code == 400
    assert client.delete("/upload/not-a-uuid").status_code == 400
    assert client.get("/upload", params={"page": 0}).status_code == 400


def test_upload_ignores_parts_under_other_field_names():
    app, store = make_app()
    client = TestClient(app)
    res = client.post("/upload", files={"attachment": ("cat.png", b"png", "image/png")})
    assert res.status_code == 400
    assert res.json()["message"] == "No file uploaded"

    res = client.post(
        "/upload/multiple",
        files=[
            ("files", ("a.png", b"aaa", "image/png")),
            ("extra", ("b.png", b"bbb", "image/png")),
        ],
    )
    assert res.status_code == 201
    assert [r["originalName"] for r in res.json()] == ["a.png"]

    res = client.post("/upload/multiple", files={"file": ("c.png", b"ccc", "image/png")})
    assert res.status_code == 400
    assert res.json()["message"] == "No files uploaded"
    assert len(asyncio.run(store.list())) == 1
