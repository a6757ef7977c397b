from app.routers.files import read_upload
from conftest import run


class FakeUpload:
    def __init__(self, data, size=None):
        self.data = data
        self.size = size
        self.requested = []

    async def read(self, size=-1):
        self.requested.append(size)
        return self.data if size < 0 else self.data[:size]


def test_small_file_is_read_whole():
    upload = FakeUpload(b"hello", size=5)
    assert run(read_upload(upload, 10)) == (b"hello", 5)
    assert upload.requested == [11]


def test_read_stops_one_byte_past_the_ceiling():
    upload = FakeUpload(b"x" * 100)
    data, size = run(read_upload(upload, 10))
    assert len(data) == 11
    assert size == 11
    assert upload.requested == [11]


def test_declared_oversize_is_not_read():
    upload = FakeUpload(b"x" * 100, size=100)
    assert run(read_upload(upload, 10)) == (b"", 100)
    assert upload.requested == []
