from __future__ import annotations

import asyncio
import json
import math
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from starboard.client import RecordsClient
from starboard.models import FormDraft, PageResult, Record
from starboard.store import RecordStore

BACKEND_URL = "http://backend.test"


def make_records(count: int) -> List[Dict[str, str]]:
    return [
        {
            "_id": f"x{index}",
            "name": f"Star {index}",
            "email": f"star{index}@example.com",
            "major": "Drama" if index % 2 else "Film",
        }
        for index in range(1, count + 1)
    ]


class FakeBackend:
    """In-memory stand-in for the records REST backend."""

    def __init__(self, records: Optional[List[Dict[str, str]]] = None) -> None:
        self.records = list(records or [])
        self.requests: List[httpx.Request] = []
        self.failures: Dict[str, int] = {}
        self._created = 0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.method == method]

    def _find(self, record_id: str) -> Optional[Dict[str, str]]:
        for record in self.records:
            if record["_id"] == record_id:
                return record
        return None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.failures:
            return httpx.Response(self.failures[request.method], json={"message": "backend unavailable"})

        path = request.url.path
        if path == "/records":
            if request.method == "GET":
                return self._list(request)
            if request.method == "POST":
                self._created += 1
                body = json.loads(request.content)
                body["_id"] = f"new{self._created}"
                self.records.append(body)
                return httpx.Response(201, json=body)
        elif path.startswith("/records/"):
            record_id = unquote(path[len("/records/"):])
            record = self._find(record_id)
            if record is None:
                return httpx.Response(404, json={"message": "Star not found"})
            if request.method == "PUT":
                record.update(json.loads(request.content))
                return httpx.Response(200, json=record)
            if request.method == "DELETE":
                self.records.remove(record)
                return httpx.Response(204)
        return httpx.Response(405)

    def _list(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        page = int(params.get("page", "1"))
        limit = int(params.get("limit", "6"))
        search = params.get("search", "").lower()
        matches = [record for record in self.records if search in record["name"].lower()]
        total_pages = max(1, math.ceil(len(matches) / limit))
        start = (page - 1) * limit
        return httpx.Response(
            200,
            json={"data": matches[start:start + limit], "totalPages": total_pages},
        )


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend(make_records(14))


@pytest.fixture()
def records_client(backend: FakeBackend) -> RecordsClient:
    return RecordsClient(BACKEND_URL, transport=backend.transport())


def _record(index: int) -> Record:
    return Record(id=f"x{index}", name=f"Star {index}", email=f"s{index}@example.com", major="Drama")


class StubClient:
    """Records client double that serves generated pages and records every call."""

    def __init__(self, total_pages: int = 3) -> None:
        self.calls: List[Tuple] = []
        self.total_pages = total_pages
        self.errors: Dict[str, Exception] = {}

    def _maybe_fail(self, name: str) -> None:
        error = self.errors.get(name)
        if error is not None:
            raise error

    async def list_records(self, page: int, page_size: int, search_term: str = "") -> PageResult:
        self.calls.append(("list", page, page_size, search_term))
        self._maybe_fail("list")
        start = (page - 1) * page_size + 1
        items = tuple(_record(index) for index in range(start, start + page_size))
        return PageResult(items=items, total_pages=self.total_pages)

    async def create_record(self, draft: FormDraft) -> None:
        self.calls.append(("create", draft.to_payload()))
        self._maybe_fail("create")

    async def update_record(self, record_id: str, draft: FormDraft) -> None:
        self.calls.append(("update", record_id, draft.to_payload()))
        self._maybe_fail("update")

    async def delete_record(self, record_id: str) -> None:
        self.calls.append(("delete", record_id))
        self._maybe_fail("delete")

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture()
def client() -> StubClient:
    return StubClient()


@pytest.fixture()
def store(client: StubClient) -> RecordStore:
    store = RecordStore(client, page_size=6)
    asyncio.run(store.ensure_loaded())
    client.calls.clear()
    return store
