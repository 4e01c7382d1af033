"""Modal dialog state for creating, editing and deleting records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .models import FormDraft, Record
from .store import RecordStore

logger = logging.getLogger("starboard.modals")

DELETE_ACKNOWLEDGMENT = "Record deleted!"


@dataclass(frozen=True)
class Closed:
    """No modal is shown."""


@dataclass
class Creating:
    draft: FormDraft = field(default_factory=FormDraft)


@dataclass
class Editing:
    target: Record
    draft: FormDraft


@dataclass(frozen=True)
class ConfirmingDelete:
    record_id: str


ModalState = Union[Closed, Creating, Editing, ConfirmingDelete]

Notifier = Callable[[str], None]


class ModalController:
    """Track the single open modal and route its submissions to the store."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self.state: ModalState = Closed()

    @property
    def is_open(self) -> bool:
        return not isinstance(self.state, Closed)

    @property
    def draft(self) -> Optional[FormDraft]:
        if isinstance(self.state, (Creating, Editing)):
            return self.state.draft
        return None

    def open_create(self) -> None:
        self._store.clear_error()
        self.state = Creating()

    def open_edit(self, record: Record) -> None:
        self._store.clear_error()
        self.state = Editing(target=record, draft=FormDraft.from_record(record))

    def open_delete(self, record_id: str) -> None:
        self._store.clear_error()
        self.state = ConfirmingDelete(record_id=record_id)

    def update_draft(self, **fields: Optional[str]) -> None:
        draft = self.draft
        if draft is None:
            raise RuntimeError("No form is open")
        draft.update(**fields)

    def cancel(self) -> None:
        if isinstance(self.state, (Creating, Editing)):
            self._store.clear_error()
        self.state = Closed()

    async def submit(self) -> bool:
        """Save the open form; the modal stays open when saving fails."""

        state = self.state
        if isinstance(state, Creating):
            saved = await self._store.create_record(state.draft)
        elif isinstance(state, Editing):
            saved = await self._store.update_record(state.target.id, state.draft)
        else:
            raise RuntimeError("No form is open")

        if saved and self.state is state:
            self.state = Closed()
        return saved

    async def confirm(self, notify: Optional[Notifier] = None) -> bool:
        state = self.state
        if not isinstance(state, ConfirmingDelete):
            raise RuntimeError("No deletion is awaiting confirmation")

        self.state = Closed()
        if notify is not None:
            notify(DELETE_ACKNOWLEDGMENT)
        logger.info("Deleting record %s", state.record_id)
        return await self._store.delete_record(state.record_id)


__all__ = [
    "Closed",
    "ConfirmingDelete",
    "Creating",
    "DELETE_ACKNOWLEDGMENT",
    "Editing",
    "ModalController",
    "ModalState",
]
