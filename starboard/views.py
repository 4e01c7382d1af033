"""Template rendering for the records management page."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .modals import ConfirmingDelete, Creating, Editing, ModalState
from .sessions import Workspace

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def build_templates() -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
    templates.env.globals["now"] = datetime.now
    return templates


def modal_kind(state: ModalState) -> Optional[str]:
    if isinstance(state, Creating):
        return "create"
    if isinstance(state, Editing):
        return "edit"
    if isinstance(state, ConfirmingDelete):
        return "delete"
    return None


def page_context(
    workspace: Workspace,
    *,
    messages: Sequence[Dict[str, str]] = (),
) -> Dict[str, Any]:
    """Template variables for ``records.html``."""

    store = workspace.store
    modals = workspace.modals
    # Form modals show the error themselves; otherwise it is a page alert.
    page_error = "" if modals.draft is not None else store.error_message
    return {
        "records": store.records,
        "search_term": store.query.search_term,
        "page": store.query.page,
        "total_pages": store.total_pages,
        "has_previous": store.has_previous,
        "has_next": store.has_next,
        "is_loading": store.is_loading,
        "messages": list(messages),
        "page_error": page_error,
        "modal": modal_kind(modals.state),
        "draft": modals.draft,
        "error_message": store.error_message,
    }


def render_records_page(
    templates: Jinja2Templates,
    request: Request,
    workspace: Workspace,
    *,
    messages: Sequence[Dict[str, str]] = (),
):
    return templates.TemplateResponse(
        request,
        "records.html",
        page_context(workspace, messages=messages),
    )


__all__ = ["TEMPLATE_DIR", "build_templates", "modal_kind", "page_context", "render_records_page"]
