import asyncio
import time

import pytest

from app.services.database import JSONAdapter, MemoryAdapter
from conftest import run


def test_save_and_read_back(storage):
    key = "uploads/2024-01-01/abc/a.txt"
    run(storage.save_bytes(key, b"hello", "text/plain", metadata={"fileId": "abc"}))

    assert run(storage.file_exists(key))
    assert run(storage.get_file(key)) == b"hello"
    info = run(storage.get_file_metadata(key))
    assert info["size"] == 5
    assert info["contentType"] == "text/plain"
    assert info["metadata"] == {"fileId": "abc"}


def test_missing_blob(storage):
    with pytest.raises(FileNotFoundError):
        run(storage.get_file("uploads/nope.txt"))
    assert run(storage.get_file_metadata("uploads/nope.txt")) is None
    assert run(storage.delete_file("uploads/nope.txt")) is False


def test_keys_cannot_escape_base_dir(storage):
    with pytest.raises(ValueError):
        run(storage.get_file("../../etc/passwd"))


def test_expired_signature_is_rejected(storage):
    expired = int(time.time()) - 10
    signature = storage._sign("uploads/a.txt", expired)
    assert not storage.verify_signature("uploads/a.txt", expired, signature)


def test_signature_is_bound_to_key(storage):
    url = run(storage.get_file_url("uploads/a.txt", expires_in=60))
    expires = int(url.split("expires=")[1].split("&")[0])
    signature = url.split("signature=")[1]
    assert storage.verify_signature("uploads/a.txt", expires, signature)
    assert not storage.verify_signature("uploads/b.txt", expires, signature)


def test_json_adapter_persists_between_instances(tmp_path):
    adapter = JSONAdapter(tmp_path)
    run(adapter.initialize())
    run(adapter.put_record({"id": "a", "status": "uploaded"}))
    run(adapter.update_record("a", {"status": "processed"}))

    reopened = JSONAdapter(tmp_path)
    run(reopened.initialize())
    assert run(reopened.get_record("a")) == {"id": "a", "status": "processed"}

    assert run(reopened.update_record("missing", {"status": "processed"})) is None
    assert run(reopened.get_record("missing")) is None
    assert run(reopened.delete_record("a")) is True
    assert run(reopened.delete_record("a")) is False


def test_memory_adapter_returns_copies():
    adapter = MemoryAdapter()
    run(adapter.put_record({"id": "a", "userMetadata": {"tags": ["x"]}}))

    record = run(adapter.get_record("a"))
    record["userMetadata"]["tags"].append("y")
    assert run(adapter.get_record("a"))["userMetadata"] == {"tags": ["x"]}

    assert run(adapter.update_record("b", {"status": "processed"})) is None
    assert adapter.count() == 1


def test_json_adapter_concurrent_writes_keep_last_state(tmp_path):
    adapter = JSONAdapter(tmp_path)

    async def scenario():
        await adapter.initialize()
        await adapter.put_record({"id": "a", "step": 0})
        await asyncio.gather(*(adapter.update_record("a", {"step": step}) for step in range(1, 21)))
        await asyncio.gather(*(adapter.put_record({"id": f"r{i}"}) for i in range(10)))

    run(scenario())

    reopened = JSONAdapter(tmp_path)
    run(reopened.initialize())
    assert run(reopened.get_record("a")) == {"id": "a", "step": 20}
    assert all(run(reopened.get_record(f"r{i}")) == {"id": f"r{i}"} for i in range(10))
