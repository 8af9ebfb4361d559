from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from labfy.api.deps import get_contrato_service, unwrap
from labfy.core.logging_setup import logger
from labfy.schemas.contrato import ContratoUpdate
from labfy.services.contrato import ContratoService

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


class WebhookCallback(BaseModel):
    contrato_id: UUID
    status: str
    data: dict[str, Any] | None = None


@router.get("/status")
def webhook_status() -> dict[str, Any]:
    return {
        "success": True,
        "data": {"status": "online", "timestamp": datetime.now(timezone.utc).isoformat()},
    }


@router.post("/callback")
async def webhook_callback(
    payload: WebhookCallback,
    service: ContratoService = Depends(get_contrato_service),
) -> dict[str, Any]:
    """Recebe a atualização de status enviada pela automação externa."""
    logger.info(
        "[WEBHOOK] callback recebido contrato=%s status=%s data=%s",
        payload.contrato_id,
        payload.status,
        payload.data,
    )
    contrato = unwrap(await service.update(payload.contrato_id, ContratoUpdate(status=payload.status)))
    return {
        "success": True,
        "message": "Callback recebido com sucesso",
        "data": {"received": True, "contrato_id": str(contrato.id), "status": contrato.status.value},
    }
