"""Domain models for the record management front-end."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

DRAFT_FIELDS = ("name", "email", "major")


@dataclass(frozen=True)
class Record:
    """A record ("star") as stored by the backend."""

    id: str
    name: str
    email: str
    major: str

    @staticmethod
    def from_payload(data: Mapping[str, object]) -> Optional["Record"]:
        """Build a :class:`Record` from backend JSON.

        Document-store backends return ``_id`` instead of ``id``; either key is
        accepted. Returns ``None`` when no identifier is present.
        """

        identifier = data.get("id")
        if identifier in (None, ""):
            identifier = data.get("_id")
        if identifier in (None, ""):
            return None
        return Record(
            id=str(identifier),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            major=str(data.get("major") or ""),
        )


@dataclass(frozen=True)
class PageResult:
    """One page of records plus the total page count reported by the backend."""

    items: Tuple[Record, ...]
    total_pages: int = 1


@dataclass
class FormDraft:
    """Mutable, unsaved form data for a record being created or edited."""

    name: str = ""
    email: str = ""
    major: str = ""

    @staticmethod
    def from_record(record: Record) -> "FormDraft":
        return FormDraft(name=record.name, email=record.email, major=record.major)

    def update(self, **fields: Optional[str]) -> None:
        for key, value in fields.items():
            if key in DRAFT_FIELDS and value is not None:
                setattr(self, key, value)

    def to_payload(self) -> Dict[str, str]:
        return {"name": self.name, "email": self.email, "major": self.major}


@dataclass
class QueryState:
    """Parameters that determine which page of records is fetched."""

    page: int = 1
    page_size: int = 6
    search_term: str = ""


__all__ = ["DRAFT_FIELDS", "FormDraft", "PageResult", "QueryState", "Record"]
