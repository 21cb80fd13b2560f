"""
Lookup of saved contract deployments.

Deployment records live at ``<deployments_dir>/<chain_id>/<Contract>.json``
and carry the deployed address under ``address`` (or ``target``).
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


def deployment_path(deployments_dir: str | Path, chain_id: int, contract: str) -> Path:
    return Path(deployments_dir) / str(chain_id) / f"{contract}.json"


def load_deployment_address(
    deployments_dir: str | Path,
    chain_id: int,
    contract: str,
) -> str | None:
    """Return the recorded address of *contract* on *chain_id*, or ``None``.

    A missing or unreadable record is not an error; callers fall back to a
    configured address.
    """
    path = deployment_path(deployments_dir, chain_id, contract)
    if not path.exists():
        logger.info("deployments.not_found", path=str(path))
        return None

    try:
        record = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("deployments.unreadable", path=str(path), error=str(exc))
        return None

    address = None
    if isinstance(record, dict):
        address = record.get("address") or record.get("target")
    if not address:
        logger.warning("deployments.missing_address", path=str(path))
        return None

    logger.info("deployments.loaded", contract=contract, chain_id=chain_id, address=address)
    return address
