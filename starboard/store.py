"""Per-session state for the records listing and its write operations."""

from __future__ import annotations

import logging
from typing import List, Optional

from .client import RecordsAPIError, RecordsClient
from .models import FormDraft, QueryState, Record
from .validation import validate_draft

logger = logging.getLogger("starboard.store")


class RecordStore:
    """Own the current page of records and keep it in sync with the query.

    Every change to the query state triggers exactly one refresh. Refreshes
    are tagged with a generation number so that a slow response for an older
    query can never overwrite the result of a newer one.
    """

    def __init__(self, client: RecordsClient, *, page_size: int = 6) -> None:
        if page_size < 1:
            raise ValueError("Page size must be at least 1")
        self._client = client
        self.query = QueryState(page=1, page_size=page_size, search_term="")
        self.records: List[Record] = []
        self.total_pages = 1
        self.is_loading = False
        self.error_message = ""
        self.loaded = False
        self._generation = 0

    @property
    def has_previous(self) -> bool:
        return self.query.page > 1

    @property
    def has_next(self) -> bool:
        return self.query.page < self.total_pages

    def find(self, record_id: str) -> Optional[Record]:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def clear_error(self) -> None:
        self.error_message = ""

    async def refresh(self) -> None:
        self._generation += 1
        token = self._generation
        query = QueryState(
            page=self.query.page,
            page_size=self.query.page_size,
            search_term=self.query.search_term,
        )
        self.is_loading = True
        try:
            result = await self._client.list_records(query.page, query.page_size, query.search_term)
        except RecordsAPIError as exc:
            logger.warning("Failed to fetch records (page=%s, search=%r): %s", query.page, query.search_term, exc)
            return
        finally:
            if token == self._generation:
                self.is_loading = False

        if token != self._generation:
            logger.debug("Discarding stale list response for page %s", query.page)
            return

        self.records = list(result.items)
        self.total_pages = result.total_pages
        self.loaded = True

    async def ensure_loaded(self) -> None:
        if not self.loaded and not self.is_loading:
            await self.refresh()

    async def set_page(self, page: int) -> None:
        page = max(1, int(page))
        if page == self.query.page:
            return
        self.query.page = page
        await self.refresh()

    async def next_page(self) -> None:
        if self.has_next:
            await self.set_page(self.query.page + 1)

    async def previous_page(self) -> None:
        if self.has_previous:
            await self.set_page(self.query.page - 1)

    async def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("Page size must be at least 1")
        if page_size == self.query.page_size:
            return
        self.query.page_size = page_size
        self.query.page = 1
        await self.refresh()

    async def set_search(self, term: str) -> None:
        if term == self.query.search_term:
            return
        self.query.search_term = term
        self.query.page = 1
        await self.refresh()

    async def clear_search(self) -> None:
        if not self.query.search_term and self.query.page == 1:
            return
        self.query.search_term = ""
        self.query.page = 1
        await self.refresh()

    def _validate(self, draft: FormDraft) -> bool:
        self.clear_error()
        result = validate_draft(draft)
        if not result.ok:
            self.error_message = result.message
            return False
        return True

    async def create_record(self, draft: FormDraft) -> bool:
        if not self._validate(draft):
            return False
        try:
            await self._client.create_record(draft)
        except RecordsAPIError as exc:
            logger.warning("Failed to create record: %s", exc)
            self.error_message = f"Could not create the record: {exc}"
            return False
        await self.refresh()
        return True

    async def update_record(self, record_id: str, draft: FormDraft) -> bool:
        if not self._validate(draft):
            return False
        try:
            await self._client.update_record(record_id, draft)
        except RecordsAPIError as exc:
            logger.warning("Failed to update record %s: %s", record_id, exc)
            self.error_message = f"Could not update the record: {exc}"
            return False
        await self.refresh()
        return True

    async def delete_record(self, record_id: str) -> bool:
        try:
            await self._client.delete_record(record_id)
        except RecordsAPIError as exc:
            logger.warning("Failed to delete record %s: %s", record_id, exc)
            self.error_message = f"Could not delete the record: {exc}"
            return False
        # Removed locally; the page stays one entry short until the next fetch.
        self.records = [record for record in self.records if record.id != record_id]
        return True


__all__ = ["RecordStore"]
