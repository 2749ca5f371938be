from __future__ import annotations

import uuid

from fastapi import APIRouter
from starlette.responses import JSONResponse

from modbuilder.core.config.settings import workspace_root
from modbuilder.core.observability.metrics import inc_named

router = APIRouter()


@router.get("/health/live")
async def live():
    inc_named("health_live")
    return {"status": "ok"}


@router.get("/health/ready")
def ready():
    """
    Readiness reflects ability to assemble modules:
    the workspace root must exist (or be creatable) and be writable.
    """
    inc_named("health_ready")

    problems: list[str] = []
    root = workspace_root()
    try:
        root.mkdir(parents=True, exist_ok=True)
        marker = root / f".ready_{uuid.uuid4().hex}.tmp"
        marker.write_text("ok", encoding="utf-8")
        marker.unlink()
    except OSError as e:
        problems.append(f"workspace_not_writable:{root} err={type(e).__name__}")

    if problems:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "problems": problems},
        )

    return {"status": "ready", "workspace_root": str(root)}
