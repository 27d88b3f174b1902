"""Test doubles for document storage and the AI gateway."""

from __future__ import annotations

from services.errors import UploadFailed


class FakeStorage:
    """Records uploads; files named in ``fail_on`` raise like a broken store."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.uploaded: list[str] = []

    def upload(self, path, f):
        if f.filename in self.fail_on:
            raise UploadFailed(f"could not store {path}")
        self.uploaded.append(path)

    def public_url(self, path):
        return f"/uploads/{path}"


class FakeResponse:
    """Stand-in for ``requests.Response`` as returned by the gateway."""

    def __init__(self, status_code=200, json_data=None, text=""):
        self.status_code = status_code
        self._json = json_data
        self.text = text

    def json(self):
        if self._json is None:
            raise ValueError("no JSON body")
        return self._json


def chat_reply(content: str) -> FakeResponse:
    return FakeResponse(200, {"choices": [{"message": {"role": "assistant", "content": content}}]})
