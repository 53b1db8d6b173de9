"""Execution tracking: live background executions and durable history."""

from __future__ import annotations

from .background import BackgroundExecutionManager, ExecutionListener
from .history import ExecutionHistoryManager
from .models import (
    BackgroundExecution,
    ExecutionHistoryEntry,
    ExecutionHistoryUpdate,
    ExecutionMetadata,
    ExecutionStatistics,
    ExecutionStatus,
    NodeResult,
)

__all__ = [
    "BackgroundExecution",
    "BackgroundExecutionManager",
    "ExecutionHistoryEntry",
    "ExecutionHistoryManager",
    "ExecutionHistoryUpdate",
    "ExecutionListener",
    "ExecutionMetadata",
    "ExecutionStatistics",
    "ExecutionStatus",
    "NodeResult",
]
