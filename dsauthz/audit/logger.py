"""
Audit logging module for dsauthz access decisions.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from typing import Any, Dict, List, Optional
import asyncio
import json
import logging

import aiofiles

from ..core.types import AuditEvent

logger = logging.getLogger(__name__)


def _matches(event: AuditEvent, actor_id: Optional[str], event_type: Optional[str],
             resource_id: Optional[str], outcome: Optional[str]) -> bool:
    if actor_id and event.actor_id != actor_id:
        return False
    if event_type and event.event_type != event_type:
        return False
    if resource_id and event.resource_id != resource_id:
        return False
    if outcome and event.outcome != outcome:
        return False
    return True


class AuditLogger(ABC):
    """Abstract base class for audit logging"""

    @abstractmethod
    async def log(self, event: AuditEvent) -> None:
        """Log an audit event"""
        pass

    @abstractmethod
    async def get_events(
        self,
        actor_id: Optional[str] = None,
        event_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        outcome: Optional[str] = None,
    ) -> List[AuditEvent]:
        """Retrieve audit events with optional filtering"""
        pass

    async def close(self) -> None:
        """Close the audit logger and release resources"""
        pass


class MemoryAuditLogger(AuditLogger):
    """In-memory audit logger for development and testing"""

    def __init__(self, max_entries: int = 1000):
        self.max_entries = max_entries
        self.events: deque = deque(maxlen=max_entries)
        self._lock = asyncio.Lock()

    async def log(self, event: AuditEvent) -> None:
        async with self._lock:
            self.events.append(event)

    async def get_events(
        self,
        actor_id: Optional[str] = None,
        event_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        outcome: Optional[str] = None,
    ) -> List[AuditEvent]:
        async with self._lock:
            return [e for e in self.events if _matches(e, actor_id, event_type, resource_id, outcome)]


class FileAuditLogger(AuditLogger):
    """Append-only JSON lines audit log"""

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._lock = asyncio.Lock()

    @staticmethod
    def _to_record(event: AuditEvent) -> Dict[str, Any]:
        return {
            "event_id": event.event_id,
            "event_type": event.event_type,
            "actor_id": event.actor_id,
            "timestamp": event.timestamp.isoformat(),
            "resource_id": event.resource_id,
            "action": event.action,
            "outcome": event.outcome,
            "reason": event.reason,
            "details": event.details,
        }

    @staticmethod
    def _from_record(data: Dict[str, Any]) -> AuditEvent:
        return AuditEvent(
            event_id=data["event_id"],
            event_type=data["event_type"],
            actor_id=data.get("actor_id"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            resource_id=data.get("resource_id"),
            action=data.get("action"),
            outcome=data.get("outcome"),
            reason=data.get("reason"),
            details=data.get("details") or {},
        )

    async def log(self, event: AuditEvent) -> None:
        async with self._lock:
            async with aiofiles.open(self.file_path, "a") as f:
                await f.write(json.dumps(self._to_record(event)) + "\n")

    async def get_events(
        self,
        actor_id: Optional[str] = None,
        event_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        outcome: Optional[str] = None,
    ) -> List[AuditEvent]:
        events = []

        try:
            async with aiofiles.open(self.file_path, "r") as f:
                content = await f.read()
        except FileNotFoundError:
            return events

        for line in content.splitlines():
            if not line.strip():
                continue
            try:
                event = self._from_record(json.loads(line))
            except (json.JSONDecodeError, KeyError, ValueError) as e:
                logger.error(f"Skipping malformed audit record in {self.file_path}: {e}")
                continue

            if _matches(event, actor_id, event_type, resource_id, outcome):
                events.append(event)

        return events


def create_audit_logger(logger_type: str = "memory", **kwargs) -> AuditLogger:
    """
    Factory function to create audit loggers

    Args:
        logger_type: Type of logger ("memory" or "file")
        **kwargs: Additional arguments for the logger
    """
    if logger_type == "memory":
        return MemoryAuditLogger(kwargs.get("max_entries", 1000))
    elif logger_type == "file":
        return FileAuditLogger(kwargs.get("file_path", "audit.log"))
    raise ValueError(f"Unknown logger type: {logger_type}")
