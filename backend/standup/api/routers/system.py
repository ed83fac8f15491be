from __future__ import annotations

import time
from pathlib import Path
from uuid import uuid4

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from standup.config import settings


router = APIRouter()


def _probe_directory(path: Path) -> dict[str, object]:
    try:
        path.mkdir(parents=True, exist_ok=True)
        token = f"{time.time()}-{uuid4()}"
        probe = path / ".ready_probe"
        probe.write_text(token, encoding="utf-8")
        read_back = probe.read_text(encoding="utf-8")
        probe.unlink(missing_ok=True)
        if read_back != token:
            raise RuntimeError("storage probe mismatch")
    except Exception as exc:
        return {"ok": False, "path": str(path), "error": str(exc)}
    return {"ok": True, "path": str(path)}


@router.get("/")
def root() -> dict[str, str]:
    return {"service": "yti-standup", "status": "running"}


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "environment": settings.app_env}


@router.get("/ready", response_model=None)
def ready() -> JSONResponse:
    checks = {
        "history": _probe_directory(settings.history_path.parent),
        "markdown": _probe_directory(Path(settings.markdown_dir)),
        "gateway": {"ok": True, "model": settings.gemini_model, "server_key": bool(settings.gemini_api_key.strip())},
    }
    ok = all(bool(check["ok"]) for check in checks.values())
    payload = {
        "status": "ready" if ok else "not_ready",
        "environment": settings.app_env,
        "checks": checks,
    }
    return JSONResponse(status_code=200 if ok else 503, content=payload)
