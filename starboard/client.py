"""HTTP client for the records REST backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .models import FormDraft, PageResult, Record

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger("starboard.client")


class RecordsAPIError(RuntimeError):
    """Raised when the records backend cannot fulfil a request."""


class RecordsHTTPError(RecordsAPIError):
    """Raised when the backend answers with a non-success status code."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"backend responded with {status_code}: {detail}")


class RecordsNetworkError(RecordsAPIError):
    """Raised when the backend could not be reached at all."""


@dataclass
class _ClientConfig:
    base_url: str
    collection_path: str
    timeout: float


def _normalize_base_url(base_url: str) -> str:
    cleaned = (base_url or "").strip()
    if not cleaned:
        raise ValueError("Backend base URL must not be empty")
    return cleaned.rstrip("/")


def _normalize_collection_path(path: str) -> str:
    cleaned = (path or "").strip().strip("/")
    if not cleaned:
        raise ValueError("Collection path must not be empty")
    return "/" + cleaned


def _extract_error_message(payload: object, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return default


def _parse_total_pages(value: object) -> int:
    try:
        total = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 1
    return total if total >= 1 else 1


def parse_page(payload: object) -> PageResult:
    """Convert a list response body into a :class:`PageResult`."""

    if not isinstance(payload, dict):
        raise RecordsAPIError("Backend returned an unexpected list payload")

    raw_items = payload.get("data") or []
    if not isinstance(raw_items, list):
        raise RecordsAPIError("Backend list payload 'data' must be an array")

    items: List[Record] = []
    for entry in raw_items:
        record = Record.from_payload(entry) if isinstance(entry, dict) else None
        if record is None:
            logger.warning("Skipping malformed record in list response: %r", entry)
            continue
        items.append(record)

    return PageResult(items=tuple(items), total_pages=_parse_total_pages(payload.get("totalPages")))


class RecordsClient:
    """Issue list/create/update/delete requests against the records collection.

    Every call opens its own connection and makes exactly one attempt.
    """

    def __init__(
        self,
        base_url: str,
        *,
        collection_path: str = "/records",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = _ClientConfig(
            base_url=_normalize_base_url(base_url),
            collection_path=_normalize_collection_path(collection_path),
            timeout=timeout,
        )
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: "Settings", **kwargs: Any) -> "RecordsClient":
        return cls(
            settings.backend_url,
            collection_path=settings.collection_path,
            timeout=settings.timeout,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _collection_url(self) -> str:
        return f"{self._config.base_url}{self._config.collection_path}"

    def _record_url(self, record_id: str) -> str:
        return f"{self._collection_url()}/{quote(str(record_id), safe='')}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise RecordsNetworkError(f"Failed to contact records backend: {exc}") from exc

        if not response.is_success:
            default = response.reason_phrase or "request failed"
            try:
                parsed: object = response.json()
            except ValueError:
                parsed = response.text
            raise RecordsHTTPError(response.status_code, _extract_error_message(parsed, default))

        return response

    async def list_records(self, page: int, page_size: int, search_term: str = "") -> PageResult:
        params: Dict[str, object] = {"page": page, "limit": page_size, "search": search_term}
        response = await self._request("GET", self._collection_url(), params=params)
        try:
            payload = response.json()
        except ValueError as exc:
            raise RecordsAPIError("Backend returned an invalid list response") from exc
        return parse_page(payload)

    async def create_record(self, draft: FormDraft) -> None:
        await self._request("POST", self._collection_url(), json=draft.to_payload())

    async def update_record(self, record_id: str, draft: FormDraft) -> None:
        await self._request("PUT", self._record_url(record_id), json=draft.to_payload())

    async def delete_record(self, record_id: str) -> None:
        await self._request("DELETE", self._record_url(record_id))


__all__ = [
    "RecordsAPIError",
    "RecordsClient",
    "RecordsHTTPError",
    "RecordsNetworkError",
    "parse_page",
]
