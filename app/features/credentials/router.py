"""
Local credential administration endpoints (admin only).
"""

import logging

from fastapi import APIRouter, status

from app.features.auth.dependencies import AdminSession
from app.features.credentials.dependencies import Credentials
from app.features.credentials.links import build_signin_url
from app.features.credentials.schemas import (
    CredentialClearResponse,
    CredentialCreate,
    CredentialList,
    CredentialRead,
)
from app.features.credentials.store import CredentialEntry, local_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/credentials", tags=["Credentials"])


def to_read(entry: CredentialEntry) -> CredentialRead:
    profile = entry.profile
    return CredentialRead(
        email=entry.email,
        user_id=profile.get("id"),
        name=profile.get("name"),
        is_admin=bool(profile.get("is_admin")),
        tenant_id=profile.get("tenant_id"),
        tenant_slug=profile.get("tenant_slug"),
        tenant_name=profile.get("tenant_name"),
        signin_url=build_signin_url(entry.email, entry.password),
    )


@router.get("", response_model=CredentialList)
async def list_credentials(
    session: AdminSession,
    store: Credentials,
) -> CredentialList:
    """Persisted local logins with their test sign-in links."""
    entries = await store.entries()
    items = [to_read(entry) for entry in entries.values()]
    return CredentialList(
        items=items,
        total=len(items),
        seed_emails=getattr(store, "seed_emails", []),
    )


@router.post("", response_model=CredentialRead, status_code=status.HTTP_201_CREATED)
async def add_credential(
    payload: CredentialCreate,
    session: AdminSession,
    store: Credentials,
) -> CredentialRead:
    """Register (or replace) a local login by hand."""
    existing = await store.lookup(payload.email)
    user_id = existing.profile.get("id") if existing else None

    entry = await store.upsert(
        payload.email,
        payload.password,
        {
            "id": user_id or local_user_id(),
            "name": payload.name or payload.email.split("@")[0],
            "is_admin": payload.is_admin,
            "tenant_id": payload.tenant_id,
            "tenant_slug": payload.tenant_slug,
            "tenant_name": payload.tenant_name,
            "user_metadata": {},
        },
    )
    logger.info(f"Credential added manually by {session.email}: {entry.email}")
    return to_read(entry)


@router.delete("", response_model=CredentialClearResponse)
async def clear_credentials(
    session: AdminSession,
    store: Credentials,
) -> CredentialClearResponse:
    """Remove every persisted local login. Built-in logins keep working."""
    removed = await store.clear()
    logger.info(f"Credential store cleared by {session.email}: {removed} removed")
    return CredentialClearResponse(removed=removed)
