"""
Credential store dependency.
"""

from typing import Annotated

from fastapi import Depends, Request

from app.features.credentials.store import CredentialStore


def get_credential_store(request: Request) -> CredentialStore:
    """The single store instance owned by the application."""
    return request.app.state.credential_store


Credentials = Annotated[CredentialStore, Depends(get_credential_store)]
