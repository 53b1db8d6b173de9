"""Health router: runtime status of the scheduler, tracker and history store."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from zyra.api.deps import Runtime

router = APIRouter()


@router.get("/health")
def health(runtime: Runtime) -> dict[str, Any]:
    return runtime.health()
