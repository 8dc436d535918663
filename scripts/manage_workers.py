"""
Celery process helpers for the contract jobs.

    python scripts/manage_workers.py worker
    python scripts/manage_workers.py beat
    python scripts/manage_workers.py refresh-now
"""

import argparse
import subprocess
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

CELERY_APP = "app.core.celery_app"


def run_celery(*args: str) -> None:
    cmd = ["celery", "-A", CELERY_APP, *args]
    print(f"Running: {' '.join(cmd)}")
    subprocess.run(cmd, check=False)


def refresh_now() -> None:
    """Run the contract status refresh in-process, without a broker."""
    from app.features.contracts.tasks import refresh_contract_statuses

    result = refresh_contract_statuses.apply().get()
    print(f"Contracts marked expired: {result['updated']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage Celery workers")
    parser.add_argument("command", choices=["worker", "beat", "purge", "refresh-now"])
    parser.add_argument("--concurrency", type=int, default=2)
    parser.add_argument("--queues", default="default,contracts")

    args = parser.parse_args()

    if args.command == "worker":
        run_celery("worker", "--loglevel=info", f"--concurrency={args.concurrency}", f"--queues={args.queues}")
    elif args.command == "beat":
        run_celery("beat", "--loglevel=info")
    elif args.command == "purge":
        run_celery("purge", "-Q", args.queues, "-f")
    else:
        refresh_now()
