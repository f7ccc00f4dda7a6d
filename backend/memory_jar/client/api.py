# memory_jar/client/api.py
from __future__ import annotations

from typing import List, Optional

import requests

from memory_jar.errors import TransientStoreError, error_for_status
from memory_jar.schemas import MemoryOut

DEFAULT_TIMEOUT = 15


class MemoryApiClient:
    """Thin HTTP client for the /memories API.

    ``session`` is anything with requests-style get/post/delete, so tests can
    hand in FastAPI's TestClient.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, session=None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _call(self, method: str, path: str, **kwargs) -> dict:
        fn = getattr(self.session, method)
        try:
            resp = fn(f"{self.base_url}{path}", headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransientStoreError(f"Could not reach the server: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if resp.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            raise error_for_status(resp.status_code, message)
        return data

    def login(self, email: str, password: str) -> dict:
        data = self._call("post", "/auth/login", json={"email": email, "password": password})
        self.token = data.get("token")
        return data.get("user") or {}

    def list(self) -> List[MemoryOut]:
        data = self._call("get", "/memories")
        return [MemoryOut.model_validate(m) for m in data.get("memories", [])]

    def upsert(self, date: str, mood: str, note: str = "", image_url: Optional[str] = None) -> MemoryOut:
        body = {"date": date, "note": note, "mood": mood, "imageUrl": image_url}
        data = self._call("post", "/memories", json=body)
        if "memory" not in data:
            raise TransientStoreError("Unexpected response from server")
        return MemoryOut.model_validate(data["memory"])

    def delete(self, memory_id: str) -> None:
        self._call("delete", "/memories", params={"id": memory_id})
