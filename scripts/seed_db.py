"""
Create tables and seed a sample store.

The sample store goes through the normal provisioning workflow, so it gets
a local credential (and a real identity user when BACKEND_SERVICE_ROLE_KEY
is configured).
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.config import settings
from app.core.database import Base, db_manager
from app.core.identity import build_identity_provider
from app.features.credentials.store import build_credential_store
from app.features.tenants.provisioning import ProvisioningWorkflow
from app.features.tenants.schemas import TenantProvisionRequest
from app.models import AdminUser, Tenant


async def seed_data(admin_user_id: str | None = None) -> None:
    """Create tables, the sample store and optionally a platform admin marker."""
    print("🌱 Seeding database...")

    db_manager.init()

    async with db_manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async for db in db_manager.get_session():
        if admin_user_id:
            existing = await db.execute(select(AdminUser).where(AdminUser.user_id == admin_user_id))
            if existing.scalars().first() is None:
                db.add(AdminUser(user_id=admin_user_id, role="admin", is_super_admin=True))
                await db.commit()
                print(f"✅ Platform admin registered: {admin_user_id}")

        result = await db.execute(select(Tenant).limit(1))
        if result.first():
            print("⚠️  Database already contains stores. Skipping sample store.")
            continue

        workflow = ProvisioningWorkflow(
            db,
            build_identity_provider(settings),
            build_credential_store(),
        )
        report = await workflow.run(
            TenantProvisionRequest(
                name="Loja Exemplo",
                slug="loja-exemplo",
                description="Loja criada pelo script de seed",
                admin_email="admin@lojaexemplo.com",
                admin_name="Administrador - Loja Exemplo",
                admin_password="exemplo123",
            )
        )

        print(f"✅ {report.message}")
        print(f"✅ Store: {report.data['store_url']}")
        print("✅ Login: admin@lojaexemplo.com (password: exemplo123)")
        for step in report.steps:
            print(f"   - {step.name}: {step.status.value}{f' ({step.detail})' if step.detail else ''}")

    await db_manager.close()
    print("🎉 Seeding complete!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the database")
    parser.add_argument(
        "--admin-user-id",
        help="Identity user id to register as platform admin",
    )
    args = parser.parse_args()

    asyncio.run(seed_data(args.admin_user_id))
