"""
Background tasks for contracts.

Tasks run in Celery workers, separate from the API server.
"""

import asyncio
import logging
import time

from app.core.celery_app import celery_app
from app.core.database import db_manager
from app.core.metrics import task_duration_seconds
from app.features.contracts.service import ContractService

logger = logging.getLogger(__name__)


async def _refresh_contract_statuses_async() -> int:
    # Each task run owns its event loop, so the engine is opened and disposed per run
    db_manager.init()
    updated = 0
    try:
        async for db in db_manager.get_session():
            updated = await ContractService.update_contract_status(db)
    finally:
        await db_manager.close()
    return updated


@celery_app.task(name="app.features.contracts.tasks.refresh_contract_statuses")
def refresh_contract_statuses() -> dict:
    """
    Daily job: mark every active/trial tenant whose contract ended as expired.

    Returns:
        {"updated": <count>}
    """
    logger.info("Starting contract status refresh")
    start = time.time()
    status = "success"

    try:
        updated = asyncio.run(_refresh_contract_statuses_async())
    except Exception:
        status = "failure"
        logger.exception("Contract status refresh failed")
        raise
    finally:
        task_duration_seconds.labels(
            task_name="refresh_contract_statuses", status=status
        ).observe(time.time() - start)

    logger.info(f"Contract status refresh finished: {updated} expired")
    return {"updated": updated}
