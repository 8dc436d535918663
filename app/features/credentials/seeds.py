"""
Built-in seed credentials.

Seeds are merged under persisted entries at read time and are never written
to storage, so clearing the store leaves them usable.
"""

from app.features.tenants.demo import DEMO_TENANTS

_demo_store = DEMO_TENANTS[0]

SEED_CREDENTIALS: dict[str, dict] = {
    "admin@multiloja.com": {
        "password": "admin123",
        "user": {
            "id": "00000000-0000-4000-8000-00000000a001",
            "email": "admin@multiloja.com",
            "name": "Administrador",
            "is_admin": True,
            "tenant_id": None,
            "tenant_slug": None,
            "tenant_name": None,
            "user_metadata": {},
        },
    },
    "loja@demo.com": {
        "password": "demo123",
        "user": {
            "id": "00000000-0000-4000-8000-00000000a002",
            "email": "loja@demo.com",
            "name": "Lojista Demo",
            "is_admin": False,
            "tenant_id": _demo_store.id,
            "tenant_slug": _demo_store.slug,
            "tenant_name": _demo_store.name,
            "user_metadata": {},
        },
    },
}
