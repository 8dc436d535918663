"""
Authentication business logic.

Sign-in order:
1. Local credential store (provisioned stores, manual entries, seeds).
   A matching pair signs in without contacting the identity provider.
2. Identity provider password grant, then profile / admin / membership
   lookups in the database.
"""

import copy
import logging
import secrets

from jose import JWTError
from pydantic import ValidationError as ProfileValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    AuthenticationError,
    IdentityProviderError,
    ValidationError,
)
from app.core.identity import IdentityProvider, IdentityUser
from app.core.metrics import signins_total
from app.core.security import create_access_token, create_refresh_token, decode_token
from app.features.auth.schemas import SignUpResponse, TokenResponse
from app.features.credentials.store import CredentialStore
from app.features.tenants.validators import ensure_slug_available, generate_slug
from app.models import (
    DEFAULT_CUSTOMIZATION,
    DEFAULT_TENANT_SETTINGS,
    AdminUser,
    StoreCustomization,
    Tenant,
    TenantUser,
    User,
)
from app.schemas.user import SessionUser, SignUpRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credenciais inválidas"


class AuthService:
    """Authentication service with business logic."""

    @staticmethod
    async def sign_in(
        db: AsyncSession,
        store: CredentialStore,
        identity: IdentityProvider | None,
        email: str,
        password: str,
    ) -> SessionUser:
        """
        Authenticate by email and password.

        Raises:
            AuthenticationError: Neither the local store nor the identity
                provider accepted the pair
        """
        entry = await store.lookup(email)
        if entry is not None and secrets.compare_digest(
            entry.password.encode("utf-8"), password.encode("utf-8")
        ):
            profile = {k: v for k, v in entry.profile.items() if k != "auth_source"}
            try:
                session = SessionUser(**{**profile, "email": entry.email, "auth_source": "local"})
            except ProfileValidationError as e:
                logger.warning(f"Ignoring unreadable local profile for {entry.email}: {e}")
            else:
                signins_total.labels(source="local", outcome="success").inc()
                logger.info(f"Local sign-in: {entry.email}")
                return session

        if identity is None:
            signins_total.labels(source="local", outcome="failure").inc()
            logger.warning(f"Failed sign-in (no identity provider configured): {email}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            identity_session = await identity.sign_in_with_password(email.strip().lower(), password)
        except IdentityProviderError as e:
            signins_total.labels(source="backend", outcome="failure").inc()
            logger.warning(f"Failed sign-in for {email}: {e.message}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        signins_total.labels(source="backend", outcome="success").inc()
        return await AuthService.build_backend_session(db, identity_session.user)

    @staticmethod
    async def build_backend_session(db: AsyncSession, user: IdentityUser) -> SessionUser:
        """Profile (created if missing), admin flag and active tenant for an identity user."""
        profile = await AuthService.ensure_profile(db, user)

        admin_result = await db.execute(select(AdminUser).where(AdminUser.user_id == user.id))
        is_admin = admin_result.scalars().first() is not None

        membership_result = await db.execute(
            select(Tenant)
            .join(TenantUser, TenantUser.tenant_id == Tenant.id)
            .where(TenantUser.user_id == user.id, TenantUser.is_active.is_(True))
            .order_by(TenantUser.created_at)
            .limit(1)
        )
        tenant = membership_result.scalars().first()

        metadata = user.user_metadata or {}
        return SessionUser(
            id=user.id,
            email=user.email,
            name=(profile.name if profile else None)
            or metadata.get("name")
            or user.email.split("@")[0],
            avatar_url=(profile.avatar_url if profile else None) or metadata.get("avatar_url"),
            is_admin=is_admin,
            tenant_id=tenant.id if tenant else None,
            tenant_slug=tenant.slug if tenant else None,
            tenant_name=tenant.name if tenant else None,
            user_metadata=metadata,
            auth_source="backend",
        )

    @staticmethod
    async def ensure_profile(db: AsyncSession, user: IdentityUser) -> User | None:
        """Load the profile row, creating it on first sign-in."""
        profile = await db.get(User, user.id)
        if profile is not None:
            return profile

        metadata = user.user_metadata or {}
        profile = User(
            id=user.id,
            email=user.email,
            name=metadata.get("name") or user.email.split("@")[0],
            avatar_url=metadata.get("avatar_url"),
        )
        db.add(profile)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Could not create profile for {user.email}: {e.orig}")
            return None

        logger.info(f"Profile created on sign-in: {user.email}")
        return profile

    @staticmethod
    async def sign_up(
        db: AsyncSession,
        identity: IdentityProvider,
        payload: SignUpRequest,
    ) -> SignUpResponse:
        """
        Public sign-up: identity user, profile row and optionally a store.

        The store is created only when both store_name and store_slug are
        given; its slug is checked before the identity user is created.
        """
        email = payload.email.strip().lower()
        name = (payload.name or "").strip() or email.split("@")[0]

        wants_store = bool(payload.store_name and payload.store_slug)
        slug = generate_slug(payload.store_slug) if wants_store else None
        if wants_store:
            if not slug:
                raise ValidationError("Slug é obrigatório")
            await ensure_slug_available(db, slug)

        try:
            user = await identity.sign_up(email, payload.password, metadata={"name": name})
        except IdentityProviderError as e:
            logger.warning(f"Sign-up rejected for {email}: {e.message}")
            raise ValidationError(e.message)

        db.add(User(id=user.id, email=email, name=name))
        await db.commit()

        tenant_id = None
        if wants_store:
            tenant_id = await AuthService._create_owned_store(
                db, user.id, payload.store_name.strip(), slug
            )

        logger.info(f"User signed up: {email} (store={slug if tenant_id else None})")
        return SignUpResponse(
            user_id=user.id,
            email=email,
            name=name,
            tenant_id=tenant_id,
            tenant_slug=slug if tenant_id else None,
            message="Conta criada com sucesso!",
        )

    @staticmethod
    async def _create_owned_store(
        db: AsyncSession,
        user_id: str,
        store_name: str,
        slug: str,
    ) -> str | None:
        tenant = Tenant(
            name=store_name,
            slug=slug,
            status="active",
            owner_id=user_id,
            settings=copy.deepcopy(DEFAULT_TENANT_SETTINGS),
            contract_duration_days=settings.default_contract_duration_days,
        )
        db.add(tenant)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Store not created at sign-up ({slug}): {e.orig}")
            return None

        tenant_id = tenant.id
        db.add_all([
            TenantUser(tenant_id=tenant_id, user_id=user_id, role="owner", is_active=True),
            StoreCustomization(tenant_id=tenant_id, **DEFAULT_CUSTOMIZATION),
        ])
        await db.commit()
        return tenant_id

    @staticmethod
    def generate_tokens(session: SessionUser) -> TokenResponse:
        """Access and refresh tokens carrying the session profile."""
        claims = session.to_claims()
        return TokenResponse(
            access_token=create_access_token(subject=claims),
            refresh_token=create_refresh_token(subject=claims),
            token_type="bearer",
            expires_in=settings.access_token_expire_minutes * 60,
            user=session,
        )

    @staticmethod
    async def refresh_access_token(
        store: CredentialStore,
        refresh_token: str,
    ) -> TokenResponse:
        """
        Generate a new token pair from a refresh token.

        Local sessions are only renewed while their credential still exists.

        Raises:
            AuthenticationError: Invalid, expired or revoked refresh token
        """
        try:
            payload = decode_token(refresh_token)
        except JWTError:
            raise AuthenticationError("Invalid refresh token")

        if payload.get("type") != "refresh" or not payload.get("sub"):
            raise AuthenticationError("Invalid token type")

        session = SessionUser.from_claims(payload)

        if session.auth_source == "local" and await store.lookup(session.email) is None:
            logger.warning(f"Refresh denied, local credential removed: {session.email}")
            raise AuthenticationError("Credencial local removida")

        return AuthService.generate_tokens(session)


# Singleton instance
auth_service = AuthService()
