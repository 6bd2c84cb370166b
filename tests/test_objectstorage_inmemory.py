import pytest

from authupload.objectstorage import (
    InMemoryObjectStore, ObjectNotFound, ObjectStoreClient, ObjectStoreConfigError,
    ObjectStorageSettings, PresignOptions, make_object_store_from_env,
)


@pytest.mark.asyncio
async def test_put_get_exists_delete():
    store = ObjectStoreClient(InMemoryObjectStore(bucket="b1"), "memory")
    res = await store.put("uploads/a.png", b"\x89PNG", "image/png", {"owner": "u1"})
    assert res.key == "uploads/a.png"
    assert res.size == 4
    assert res.mime_type == "image/png"
    assert res.url == "memory://b1/uploads/a.png"

    assert await store.exists("uploads/a.png") is True
    assert await store.get("uploads/a.png") == b"\x89PNG"

    await store.delete("uploads/a.png")
    assert await store.exists("uploads/a.png") is False
    with pytest.raises(ObjectNotFound):
        await store.get("uploads/a.png")


@pytest.mark.asyncio
async def test_delete_missing_key_is_noop():
    store = InMemoryObjectStore()
    await store.delete("nope")


@pytest.mark.asyncio
async def test_list_by_prefix_and_limit():
    store = InMemoryObjectStore()
    for k in ("a/1", "a/2", "a/3", "b/1"):
        await store.put(k, b"x", "text/plain")
    assert sorted(await store.list("a/")) == ["a/1", "a/2", "a/3"]
    assert len(await store.list()) == 4
    assert len(await store.list("a/", max_keys=2)) == 2


@pytest.mark.asyncio
async def test_presigned_urls_carry_op_and_expiry():
    store = InMemoryObjectStore(public_base_url="https://cdn.example.com/")
    up = await store.presigned_upload_url("uploads/my file.pdf", PresignOptions(expires_in=60))
    assert up.startswith("https://cdn.example.com/uploads/my%20file.pdf?op=put&expires=")
    down = await store.presigned_download_url("uploads/x.pdf")
    assert "op=get" in down
    assert store.public_url("uploads/x.pdf") == "https://cdn.example.com/uploads/x.pdf"


def test_presign_expiry_bounds():
    with pytest.raises(ValueError):
        PresignOptions(expires_in=0)
    with pytest.raises(ValueError):
        PresignOptions(expires_in=8 * 24 * 3600)


def test_factory_memory_adapter():
    client = make_object_store_from_env(ObjectStorageSettings(OBJECT_STORE_ADAPTER="memory", R2_BUCKET_NAME="dev"))
    assert client.adapter_name == "memory"
    assert client.public_url("k") == "memory://dev/k"


def test_factory_s3_requires_credentials():
    with pytest.raises(ObjectStoreConfigError) as ei:
        make_object_store_from_env(ObjectStorageSettings(OBJECT_STORE_ADAPTER="s3", R2_BUCKET_NAME="b"))
    msg = str(ei.value)
    assert "R2_ACCESS_KEY_ID" in msg and "R2_ACCOUNT_ID" in msg


def test_factory_unknown_adapter():
    with pytest.raises(ObjectStoreConfigError):
        make_object_store_from_env(ObjectStorageSettings(OBJECT_STORE_ADAPTER="gcs"))
