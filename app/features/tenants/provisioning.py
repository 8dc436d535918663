"""
Tenant provisioning workflow.

Creating a store is a linear saga of named steps. Each step records an
outcome (succeeded, skipped, failed). Only validation and tenant creation
can abort the run; everything else is best-effort and is reported back.

    validate -> create_auth_user -> create_tenant -> create_profile
      -> link_tenant_user -> create_customization -> register_credential

When privileged user creation fails (no service-role key, duplicate email,
transport error) the run continues in demo mode: the tenant has no owner
and the only login is the local credential entry.
"""

import copy
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.error_tracking import error_tracker
from app.core.exceptions import ProvisioningError, SlugConflictError
from app.core.identity import IdentityProvider, IdentityUser
from app.core.metrics import provisioning_step_failures_total, tenants_provisioned_total
from app.core.result import Err, attempt
from app.features.credentials.links import build_signin_url, build_store_url
from app.features.credentials.store import CredentialStore, local_user_id
from app.features.tenants.schemas import TenantProvisionRequest
from app.features.tenants.validators import (
    SLUG_TAKEN_MESSAGE,
    check_required_fields,
    ensure_slug_available,
)
from app.models import (
    DEFAULT_CUSTOMIZATION,
    DEFAULT_TENANT_SETTINGS,
    ContractStatus,
    StoreCustomization,
    Tenant,
    TenantUser,
    User,
)

logger = structlog.get_logger(__name__)

REAL_USER_MESSAGE = "Loja e usuário real criados com sucesso!"
DEMO_MODE_MESSAGE = "Loja criada com sucesso! (modo demo)"


class StepStatus(str, enum.Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepOutcome:
    name: str
    status: StepStatus
    detail: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "status": self.status.value, "detail": self.detail}


@dataclass
class ProvisioningReport:
    success: bool
    message: str
    data: dict[str, Any]
    steps: list[StepOutcome] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "data": self.data,
            "steps": [step.as_dict() for step in self.steps],
        }


class ProvisioningWorkflow:
    """
    One provisioning run.

    Usage:
        workflow = ProvisioningWorkflow(db, identity_provider, credential_store)
        report = await workflow.run(form)
    """

    def __init__(
        self,
        db: AsyncSession,
        identity: IdentityProvider | None,
        credentials: CredentialStore,
    ):
        self.db = db
        self.identity = identity
        self.credentials = credentials
        self.steps: list[StepOutcome] = []

    def _record(self, name: str, status: StepStatus, detail: str | None = None) -> None:
        self.steps.append(StepOutcome(name, status, detail))
        if status is StepStatus.FAILED:
            provisioning_step_failures_total.labels(step=name).inc()
            logger.warning("provisioning_step_failed", step=name, error=detail)

    async def _commit(self, *objects: Any) -> None:
        self.db.add_all(objects)
        await self.db.commit()

    async def _run_best_effort(self, name: str, *objects: Any, **log_context: Any) -> bool:
        result = await attempt(name, self._commit(*objects), **log_context)
        if isinstance(result, Err):
            await self.db.rollback()
            self._record(name, StepStatus.FAILED, result.message)
            return False
        self._record(name, StepStatus.SUCCEEDED)
        return True

    async def validate(self, form: TenantProvisionRequest) -> None:
        """Raise ValidationError / SlugConflictError; nothing has been written yet."""
        check_required_fields(
            name=form.name,
            slug=form.slug,
            admin_email=form.admin_email,
            admin_name=form.admin_name,
            admin_password=form.admin_password,
            contract_duration_days=form.contract_duration_days,
        )
        await ensure_slug_available(self.db, form.slug)
        self._record("validate", StepStatus.SUCCEEDED)

    async def create_auth_user(
        self,
        email: str,
        form: TenantProvisionRequest,
        slug: str,
    ) -> IdentityUser | None:
        if self.identity is None:
            self._record(
                "create_auth_user",
                StepStatus.SKIPPED,
                "Provedor de identidade não configurado",
            )
            return None

        result = await attempt(
            "create_auth_user",
            self.identity.admin_create_user(
                email,
                form.admin_password,
                metadata={
                    "name": form.admin_name.strip(),
                    "tenant_slug": slug,
                    "tenant_name": form.name.strip(),
                },
            ),
            email=email,
        )
        if isinstance(result, Err):
            self._record("create_auth_user", StepStatus.FAILED, result.message)
            return None

        self._record("create_auth_user", StepStatus.SUCCEEDED)
        return result.value

    async def create_tenant(
        self,
        form: TenantProvisionRequest,
        slug: str,
        owner_id: str | None,
    ) -> Tenant:
        """Insert the tenant row. Failure aborts the run."""
        tenant = Tenant(
            name=form.name.strip(),
            slug=slug,
            description=(form.description or "").strip(),
            status=form.status,
            settings=copy.deepcopy(form.settings or DEFAULT_TENANT_SETTINGS),
            owner_id=owner_id,
            contract_start_date=datetime.now(timezone.utc),
            contract_duration_days=form.contract_duration_days,
            contract_status=(
                ContractStatus.TRIAL.value if form.status == "trial" else ContractStatus.ACTIVE.value
            ),
        )

        result = await attempt("create_tenant", self._commit(tenant), slug=slug)
        if isinstance(result, Err):
            await self.db.rollback()
            self._record("create_tenant", StepStatus.FAILED, result.message)
            if isinstance(result.exception, IntegrityError):
                # Lost a race with another run for the same slug
                raise SlugConflictError(SLUG_TAKEN_MESSAGE, details={"slug": slug})
            raise ProvisioningError(
                f"Erro ao criar loja: {result.message}",
                details={"slug": slug},
            )

        self._record("create_tenant", StepStatus.SUCCEEDED)
        return tenant

    async def run(self, form: TenantProvisionRequest) -> ProvisioningReport:
        await self.validate(form)

        email = form.admin_email.strip().lower()
        slug = form.slug.strip().lower()

        auth_user = await self.create_auth_user(email, form, slug)
        real_user_created = auth_user is not None

        tenant = await self.create_tenant(form, slug, auth_user.id if auth_user else None)
        # Rollbacks in later steps expire the instance; keep plain values
        tenant_id, tenant_slug, tenant_name = tenant.id, tenant.slug, tenant.name

        if auth_user is not None:
            profile_ok = await self._run_best_effort(
                "create_profile",
                User(id=auth_user.id, email=email, name=form.admin_name.strip()),
                user_id=auth_user.id,
            )
            if profile_ok:
                await self._run_best_effort(
                    "link_tenant_user",
                    TenantUser(
                        tenant_id=tenant_id,
                        user_id=auth_user.id,
                        role="owner",
                        is_active=True,
                        permissions={},
                    ),
                    tenant_id=tenant_id,
                )
            else:
                self._record("link_tenant_user", StepStatus.SKIPPED, "Perfil não criado")
        else:
            self._record("create_profile", StepStatus.SKIPPED, "Sem usuário real")
            self._record("link_tenant_user", StepStatus.SKIPPED, "Sem usuário real")

        await self._run_best_effort(
            "create_customization",
            StoreCustomization(tenant_id=tenant_id, **DEFAULT_CUSTOMIZATION),
            tenant_id=tenant_id,
        )

        user_id = auth_user.id if auth_user else local_user_id()
        await self.register_credential(
            email,
            form,
            {
                "id": user_id,
                "name": form.admin_name.strip(),
                "is_admin": False,
                "tenant_id": tenant_id,
                "tenant_slug": tenant_slug,
                "tenant_name": tenant_name,
                "user_metadata": auth_user.user_metadata if auth_user else {},
            },
        )

        mode = "real" if real_user_created else "demo"
        tenants_provisioned_total.labels(mode=mode).inc()

        failed = [step.name for step in self.steps if step.status is StepStatus.FAILED]
        if failed:
            error_tracker.capture_message(
                "Provisioning completed with failed steps",
                level="warning",
                context={"provisioning": {"tenant_id": tenant_id, "failed_steps": failed}},
            )

        logger.info(
            "tenant_provisioned",
            tenant_id=tenant_id,
            tenant_slug=tenant_slug,
            mode=mode,
            failed_steps=failed,
        )

        return ProvisioningReport(
            success=True,
            message=REAL_USER_MESSAGE if real_user_created else DEMO_MODE_MESSAGE,
            data={
                "tenant_id": tenant_id,
                "tenant_slug": tenant_slug,
                "user_id": user_id,
                "real_user_created": real_user_created,
                "registration_url": build_signin_url(email, form.admin_password),
                "store_url": build_store_url(tenant_slug),
            },
            steps=self.steps,
        )

    async def register_credential(
        self,
        email: str,
        form: TenantProvisionRequest,
        profile: dict[str, Any],
    ) -> None:
        result = await attempt(
            "register_credential",
            self.credentials.upsert(email, form.admin_password, profile),
            email=email,
        )
        if isinstance(result, Err):
            self._record("register_credential", StepStatus.FAILED, result.message)
            return

        self._record("register_credential", StepStatus.SUCCEEDED)
        logger.info("credential_registered", email=email, tenant_slug=profile.get("tenant_slug"))
