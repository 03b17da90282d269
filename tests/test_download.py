from __future__ import annotations

import pytest
import requests

from ollama_installer.errors import DownloadError
from ollama_installer.lib.download import download_file


class FakeResponse:
    def __init__(self, chunks, status=200):
        self._chunks = chunks
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size=1):
        yield from self._chunks

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_download_streams_to_file(tmp_path):
    session = FakeSession(FakeResponse([b"EL", b"", b"F"]))
    dest = download_file("https://example.invalid/ollama", tmp_path / "sub" / "ollama", session=session)

    assert dest.read_bytes() == b"ELF"
    url, kwargs = session.requests[0]
    assert kwargs["stream"] is True
    assert kwargs["allow_redirects"] is True


def test_http_error_propagates(tmp_path):
    session = FakeSession(FakeResponse([b"not found"], status=404))

    with pytest.raises(DownloadError, match="404"):
        download_file("https://example.invalid/ollama", tmp_path / "ollama", session=session)

    assert not (tmp_path / "ollama").exists()


def test_network_error_propagates(tmp_path):
    session = FakeSession(error=requests.ConnectionError("connection refused"))

    with pytest.raises(DownloadError, match="connection refused"):
        download_file("https://example.invalid/ollama", tmp_path / "ollama", session=session)
