from __future__ import annotations

from fastapi import APIRouter, File, Form, HTTPException, Query, Request, UploadFile

from standup.api.contracts import TextStandupRequest
from standup.api.services.ingestion import (
    GatewayGetter,
    HistoryStoreGetter,
    ingest_audio_standup,
    ingest_text_standup,
)
from standup.config import settings
from standup.storage import clamp_history_limit


def build_standups_router(
    *,
    get_gateway: GatewayGetter,
    get_history_store: HistoryStoreGetter,
) -> APIRouter:
    router = APIRouter()

    @router.post("/standup")
    async def create_audio_standup(
        request: Request,
        audio: UploadFile | None = File(default=None),
        display_name: str | None = Form(default=None, alias="displayName"),
    ) -> dict[str, object]:
        if audio is None:
            raise HTTPException(status_code=400, detail="No audio file received.")
        content = await audio.read(settings.max_audio_bytes + 1)
        entry = ingest_audio_standup(
            audio=content,
            mime_type=audio.content_type,
            display_name=display_name,
            headers=request.headers,
            get_gateway=get_gateway,
            get_history_store=get_history_store,
        )
        return {"entry": entry.to_wire()}

    @router.post("/standup-text")
    def create_text_standup(payload: TextStandupRequest, request: Request) -> dict[str, object]:
        entry = ingest_text_standup(
            text=payload.text,
            display_name=payload.display_name,
            headers=request.headers,
            get_gateway=get_gateway,
            get_history_store=get_history_store,
        )
        return {"entry": entry.to_wire()}

    @router.get("/history")
    def list_history(limit: str | None = Query(default=None)) -> dict[str, object]:
        bounded = clamp_history_limit(
            limit,
            default=settings.history_default_limit,
            maximum=settings.history_max_limit,
        )
        entries = get_history_store().recent(bounded)
        return {"entries": [entry.to_wire() for entry in entries]}

    return router
