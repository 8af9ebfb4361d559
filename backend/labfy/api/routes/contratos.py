from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from labfy.api.deps import get_contrato_service, unwrap
from labfy.models.contrato import ContratoStatus
from labfy.schemas.contrato import ContratoCreate, ContratoFilters, ContratoRead, ContratoUpdate, ContratoWithRelations
from labfy.services.contrato import ContratoService

router = APIRouter(prefix="/contratos", tags=["contratos"])


@router.get("", response_model=List[ContratoWithRelations])
async def list_contratos(
    status_filter: ContratoStatus | None = Query(default=None, alias="status"),
    cliente_id: UUID | None = None,
    projeto_id: UUID | None = None,
    service: ContratoService = Depends(get_contrato_service),
) -> List[ContratoWithRelations]:
    filters = ContratoFilters(status=status_filter, cliente_id=cliente_id, projeto_id=projeto_id)
    return unwrap(await service.list(filters))


@router.get("/{contrato_id}", response_model=ContratoWithRelations)
async def get_contrato(
    contrato_id: UUID,
    service: ContratoService = Depends(get_contrato_service),
) -> ContratoWithRelations:
    return unwrap(await service.get(contrato_id))


@router.post("", response_model=ContratoRead, status_code=status.HTTP_201_CREATED)
async def create_contrato(
    payload: ContratoCreate,
    service: ContratoService = Depends(get_contrato_service),
) -> ContratoRead:
    return ContratoRead.model_validate(unwrap(await service.create(payload)))


@router.patch("/{contrato_id}", response_model=ContratoRead)
async def update_contrato(
    contrato_id: UUID,
    payload: ContratoUpdate,
    service: ContratoService = Depends(get_contrato_service),
) -> ContratoRead:
    return ContratoRead.model_validate(unwrap(await service.update(contrato_id, payload)))


@router.delete("/{contrato_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contrato(
    contrato_id: UUID,
    service: ContratoService = Depends(get_contrato_service),
) -> Response:
    unwrap(await service.delete(contrato_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
