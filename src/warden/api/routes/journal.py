"""Journal API endpoints.

POST /api/journal/create - Create entry
POST /api/journal/update - Replace own entry
POST /api/journal/delete - Delete own entry
GET /api/journal - List the actor's own entries

Mutations record the client address and user agent in the access log.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from warden.api.app import get_db_session
from warden.db.repo import DbSession
from warden.models.types import (
    JournalCreateRequest,
    JournalDeleteRequest,
    JournalEntryOut,
    JournalEntryResponse,
    JournalFields,
    JournalListResponse,
    JournalUpdateRequest,
    MessageResponse,
)
from warden.records.journal import (
    AccessContext,
    JournalInput,
    create_journal_entry,
    delete_journal_entry,
    list_own_entries,
    update_journal_entry,
)

router = APIRouter()


def _access_context(request: Request) -> AccessContext:
    """Client address (first X-Forwarded-For hop if proxied) and user agent."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None
    return AccessContext(ip_address=ip_address, user_agent=request.headers.get("user-agent"))


def _journal_input(body: JournalFields) -> JournalInput:
    return JournalInput(**body.model_dump(include=set(JournalFields.model_fields)))


@router.post("/journal/create", response_model=JournalEntryResponse)
def create_journal_endpoint(
    body: JournalCreateRequest,
    request: Request,
    session: DbSession = Depends(get_db_session),
) -> JournalEntryResponse:
    """Create a journal entry (private by default)."""
    entry = create_journal_entry(
        session, body.actor_id, _journal_input(body), _access_context(request)
    )
    return JournalEntryResponse(entry=JournalEntryOut.model_validate(entry))


@router.post("/journal/update", response_model=JournalEntryResponse)
def update_journal_endpoint(
    body: JournalUpdateRequest,
    request: Request,
    session: DbSession = Depends(get_db_session),
) -> JournalEntryResponse:
    """Replace the actor's entry; omitted optional fields reset to defaults."""
    entry = update_journal_entry(
        session, body.entry_id, body.actor_id, _journal_input(body), _access_context(request)
    )
    return JournalEntryResponse(entry=JournalEntryOut.model_validate(entry))


@router.post("/journal/delete", response_model=MessageResponse)
def delete_journal_endpoint(
    body: JournalDeleteRequest,
    request: Request,
    session: DbSession = Depends(get_db_session),
) -> MessageResponse:
    delete_journal_entry(session, body.entry_id, body.actor_id, _access_context(request))
    return MessageResponse(message="Journal entry deleted successfully")


@router.get("/journal", response_model=JournalListResponse)
def list_journal_endpoint(
    actor_id: str = Query(...),
    session: DbSession = Depends(get_db_session),
) -> JournalListResponse:
    """List the actor's own entries, newest first."""
    entries = list_own_entries(session, actor_id)
    return JournalListResponse(entries=[JournalEntryOut.model_validate(e) for e in entries])
