"""Health check service.

ONLY health checking - reports storage capacity and writability.
"""

import logging
import os
import tempfile
from typing import Any, Dict

from ..config.constants import StorageDefaults
from ..core.exceptions import HokkuError
from ..models.policy import ValidationPolicy
from ..storage.file_store import FileStore
from ..utils.timezone import Timer, format_duration, utc_now, to_utc_string

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


class HealthService:
    """Aggregates storage checks into a single healthy/unhealthy status."""

    def __init__(self, policy: ValidationPolicy, version: str):
        self._store = FileStore(policy)
        self._version = version
        self._uptime = Timer()

    def check(self) -> Dict[str, Any]:
        """Run all checks.

        Returns:
            Dict with status, timestamp, checks, uptime and version
        """
        checks = {
            "storage_capacity": self._check_capacity(),
            "storage_writable": self._check_writable(),
        }
        status = HEALTHY if all(v == HEALTHY for v in checks.values()) else UNHEALTHY

        if status != HEALTHY:
            logger.warning(f"Health check failed: {checks}")

        return {
            "status": status,
            "timestamp": to_utc_string(utc_now()),
            "checks": checks,
            "uptime": format_duration(self._uptime.elapsed_seconds()),
            "version": self._version,
        }

    def _check_capacity(self) -> str:
        try:
            self._store.check_capacity()
        except HokkuError as e:
            return f"{UNHEALTHY}: {e.message}"
        return HEALTHY

    def _check_writable(self) -> str:
        root = self._store.storage_root
        try:
            self._store.ensure_directory(root)
            with tempfile.NamedTemporaryFile(
                prefix=StorageDefaults.TEMP_FILE_PREFIX + "health-", dir=root
            ) as probe:
                probe.write(b"ok")
                probe.flush()
                os.fsync(probe.fileno())
        except HokkuError as e:
            return f"{UNHEALTHY}: {e.message}"
        except OSError as e:
            return f"{UNHEALTHY}: {e}"
        return HEALTHY
