"""Browser-based records management interface."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from .client import RecordsClient
from .config import Settings
from .modals import ConfirmingDelete, Creating, Editing
from .sessions import Workspace, WorkspaceRegistry
from .store import RecordStore
from .views import build_templates, render_records_page

STATIC_DIR = Path(__file__).resolve().parent / "static"

SESSION_COOKIE_NAME = "starboard_session"

logger = logging.getLogger("starboard.web")


def create_app(
    *,
    settings: Optional[Settings] = None,
    client: Optional[RecordsClient] = None,
    registry: Optional[WorkspaceRegistry] = None,
    session_secret: Optional[str] = None,
) -> FastAPI:
    """Create the records management web application."""

    if settings is None:
        settings = Settings()

    if session_secret is None:
        session_secret = settings.session_secret or os.getenv("STARBOARD_SESSION_SECRET")
    if not session_secret:
        raise RuntimeError(
            "STARBOARD_SESSION_SECRET must be configured to use the management interface"
        )

    if client is None:
        client = RecordsClient.from_settings(settings)

    if registry is None:
        page_size = settings.page_size
        registry = WorkspaceRegistry(lambda: RecordStore(client, page_size=page_size))

    app = FastAPI(
        title="Stars Records Management",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.client = client
    app.state.registry = registry

    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret,
        session_cookie=SESSION_COOKIE_NAME,
        same_site="lax",
        max_age=int(registry.ttl.total_seconds()),
    )
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    templates = build_templates()

    def _flash(request: Request, message: str, *, category: str = "info") -> None:
        messages = request.session.get("flash_messages")
        if not isinstance(messages, list):
            messages = []
        messages.append({"message": message, "category": category})
        request.session["flash_messages"] = messages

    def _consume_flash(request: Request) -> List[Dict[str, str]]:
        messages = request.session.pop("flash_messages", [])
        if isinstance(messages, list):
            return messages
        return []

    def _get_workspace(request: Request) -> Workspace:
        current = request.session.get("workspace")
        token, workspace = registry.acquire(current if isinstance(current, str) else None)
        if token != current:
            request.session["workspace"] = token
            logger.debug("Started a new workspace")
        return workspace

    def _redirect_home(request: Request) -> RedirectResponse:
        return RedirectResponse(
            request.url_for("records_index"),
            status_code=status.HTTP_303_SEE_OTHER,
        )

    @app.get("/", response_class=HTMLResponse, name="records_index")
    async def records_index(request: Request):
        workspace = _get_workspace(request)
        await workspace.store.ensure_loaded()
        messages = _consume_flash(request)
        return render_records_page(templates, request, workspace, messages=messages)

    @app.get("/healthz", name="healthz")
    async def healthz():
        return {"status": "ok"}

    @app.post("/search", name="search")
    async def search(request: Request, search: str = Form("")):
        workspace = _get_workspace(request)
        await workspace.store.set_search(search.strip())
        return _redirect_home(request)

    @app.post("/search/clear", name="clear_search")
    async def clear_search(request: Request):
        workspace = _get_workspace(request)
        await workspace.store.clear_search()
        return _redirect_home(request)

    @app.post("/page/{page}", name="change_page")
    async def change_page(request: Request, page: int):
        workspace = _get_workspace(request)
        await workspace.store.set_page(page)
        return _redirect_home(request)

    @app.post("/records/new", name="open_create")
    async def open_create(request: Request):
        workspace = _get_workspace(request)
        workspace.modals.open_create()
        return _redirect_home(request)

    @app.post("/records/create", name="create_record")
    async def create_record(
        request: Request,
        name: str = Form(""),
        email: str = Form(""),
        major: str = Form(""),
    ):
        workspace = _get_workspace(request)
        if not isinstance(workspace.modals.state, Creating):
            return _redirect_home(request)
        workspace.modals.update_draft(name=name, email=email, major=major)
        if await workspace.modals.submit():
            _flash(request, "Record created.", category="success")
        return _redirect_home(request)

    @app.post("/records/update", name="update_record")
    async def update_record(
        request: Request,
        name: str = Form(""),
        email: str = Form(""),
        major: str = Form(""),
    ):
        workspace = _get_workspace(request)
        if not isinstance(workspace.modals.state, Editing):
            return _redirect_home(request)
        workspace.modals.update_draft(name=name, email=email, major=major)
        if await workspace.modals.submit():
            _flash(request, "Record updated.", category="success")
        return _redirect_home(request)

    @app.post("/records/delete/confirm", name="confirm_delete")
    async def confirm_delete(request: Request):
        workspace = _get_workspace(request)
        if isinstance(workspace.modals.state, ConfirmingDelete):
            await workspace.modals.confirm(
                lambda message: _flash(request, message, category="success")
            )
        return _redirect_home(request)

    @app.post("/records/{record_id}/edit", name="open_edit")
    async def open_edit(request: Request, record_id: str):
        workspace = _get_workspace(request)
        record = workspace.store.find(record_id)
        if record is None:
            _flash(request, "Record not found.", category="error")
            return _redirect_home(request)
        workspace.modals.open_edit(record)
        return _redirect_home(request)

    @app.post("/records/{record_id}/delete", name="open_delete")
    async def open_delete(request: Request, record_id: str):
        workspace = _get_workspace(request)
        if workspace.store.find(record_id) is None:
            _flash(request, "Record not found.", category="error")
            return _redirect_home(request)
        workspace.modals.open_delete(record_id)
        return _redirect_home(request)

    @app.post("/modal/cancel", name="cancel_modal")
    async def cancel_modal(request: Request):
        workspace = _get_workspace(request)
        workspace.modals.cancel()
        return _redirect_home(request)

    return app


__all__ = ["create_app"]
