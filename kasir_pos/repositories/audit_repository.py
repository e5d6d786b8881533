# ==============================================================================
# AUDIT REPOSITORY
# ==============================================================================
# Keeps the audit log in memory as a list, newest first:
# [AuditLog, AuditLog, ...]
# Nothing is written to disk; the log lives as long as the process.
# ==============================================================================

import threading
from datetime import datetime
from typing import Any, Dict, List

from kasir_pos.config import AUDIT_MAX_LOGS
from kasir_pos.models import AuditLog


class AuditRepository:
    """
    In-memory audit log.

    Entries beyond max_logs are dropped from the oldest end.
    """

    def __init__(self, max_logs: int = AUDIT_MAX_LOGS):
        """
        Args:
            max_logs: Maximum number of entries kept
        """
        self.max_logs = max_logs
        self._logs: List[AuditLog] = []
        self._lock = threading.RLock()

    def load(self) -> List[AuditLog]:
        """
        Gets every entry.

        Returns:
            Entries, newest first
        """
        with self._lock:
            return list(self._logs)

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> AuditLog:
        """
        Records a new event.

        Args:
            log_type: Event type (SESSION, SALE, STOCK)
            user: User who performed the action
            message: Human readable message
            related_id: Related id (product id, user id...)
            details: Extra data

        Returns:
            The stored entry
        """
        entry = AuditLog(
            type=log_type,
            user=user or 'system',
            message=message,
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            related_id=related_id or '',
            details=details or {},
        )
        with self._lock:
            self._logs.insert(0, entry)
            if len(self._logs) > self.max_logs:
                del self._logs[self.max_logs:]
        return entry

    def clear(self) -> None:
        with self._lock:
            self._logs.clear()
