"""
Links handed back to admins after provisioning.
"""

from urllib.parse import urlencode

from app.config import settings


def build_signin_url(email: str, password: str | None = None) -> str:
    """
    Pre-filled sign-in link.

    The password is embedded only when SIGNIN_LINK_INCLUDES_PASSWORD is on.
    """
    params = {"email": email}
    if password is not None and settings.signin_link_includes_password:
        params["password"] = password
    return f"{settings.signin_path}?{urlencode(params)}"


def build_store_url(slug: str) -> str:
    return f"{settings.storefront_path.rstrip('/')}/{slug}"
