"""
Provisioning form validation and field suggestions.
"""

import re
import unicodedata
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import SlugConflictError, ValidationError
from app.features.tenants.demo import demo_tenant_by_slug
from app.models.tenant import MAX_CONTRACT_DURATION_DAYS, Tenant

MIN_PASSWORD_LENGTH = 6

SLUG_TAKEN_MESSAGE = "Este slug já está em uso. Escolha outro."

# Lower-case words of letters and digits joined by single hyphens
SLUG_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


def generate_slug(name: str) -> str:
    """
    Build a URL-safe slug from a store name.

    "Café & Cia  Ltda" -> "cafe-cia-ltda"
    """
    normalized = unicodedata.normalize("NFD", name)
    ascii_only = "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")
    slug = ascii_only.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug.strip())
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


@dataclass(frozen=True)
class FormSuggestions:
    slug: str
    admin_email: str
    admin_name: str


def suggest_fields(name: str) -> FormSuggestions:
    slug = generate_slug(name)
    return FormSuggestions(
        slug=slug,
        admin_email=f"admin@{slug.replace('-', '')}.com",
        admin_name=f"Administrador - {name.strip()}",
    )


def check_required_fields(
    *,
    name: str,
    slug: str,
    admin_email: str,
    admin_name: str,
    admin_password: str,
    contract_duration_days: int,
) -> None:
    """Raise ValidationError with the first failing rule's message."""
    if not name.strip():
        raise ValidationError("Nome da loja é obrigatório")
    if not slug.strip():
        raise ValidationError("Slug é obrigatório")
    if not SLUG_PATTERN.fullmatch(slug.strip().lower()):
        raise ValidationError("Slug deve conter apenas letras, números e hífens (ex.: minha-loja)")
    if not admin_email.strip():
        raise ValidationError("Email do administrador é obrigatório")
    if not admin_name.strip():
        raise ValidationError("Nome do administrador é obrigatório")
    if len(admin_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres")
    if contract_duration_days < 1:
        raise ValidationError("Duração do contrato deve ser de pelo menos 1 dia")
    if contract_duration_days > MAX_CONTRACT_DURATION_DAYS:
        raise ValidationError(
            f"Duração do contrato deve ser de no máximo {MAX_CONTRACT_DURATION_DAYS} dias"
        )


async def slug_in_use(db: AsyncSession, slug: str) -> bool:
    """Case-insensitive check against stored tenants and the demo stores."""
    normalized = slug.strip().lower()
    if demo_tenant_by_slug(normalized) is not None:
        return True

    result = await db.execute(
        select(func.count()).select_from(Tenant).where(func.lower(Tenant.slug) == normalized)
    )
    return result.scalar_one() > 0


async def ensure_slug_available(db: AsyncSession, slug: str) -> None:
    if await slug_in_use(db, slug):
        raise SlugConflictError(SLUG_TAKEN_MESSAGE, details={"slug": slug})
