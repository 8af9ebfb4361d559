from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from labfy.api.deps import get_cliente_service, unwrap
from labfy.schemas.cliente import ClienteCreate, ClienteDetail, ClienteFilters, ClienteRead, ClienteUpdate
from labfy.schemas.contrato import ClienteContratoRead
from labfy.services.cliente import ClienteService, serialize_cliente

router = APIRouter(prefix="/clientes", tags=["clientes"])


@router.get("", response_model=List[ClienteRead])
async def list_clientes(
    cnpj: str | None = None,
    razao_social: str | None = None,
    service: ClienteService = Depends(get_cliente_service),
) -> List[ClienteRead]:
    clientes = unwrap(await service.list(ClienteFilters(cnpj=cnpj, razao_social=razao_social)))
    return [serialize_cliente(cliente) for cliente in clientes]


@router.get("/{cliente_id}", response_model=ClienteDetail)
async def get_cliente(
    cliente_id: UUID,
    service: ClienteService = Depends(get_cliente_service),
) -> ClienteDetail:
    return unwrap(await service.get(cliente_id))


@router.get("/{cliente_id}/contratos", response_model=List[ClienteContratoRead])
async def get_cliente_contratos(
    cliente_id: UUID,
    service: ClienteService = Depends(get_cliente_service),
) -> List[ClienteContratoRead]:
    return unwrap(await service.get_contratos(cliente_id))


@router.post("", response_model=ClienteRead, status_code=status.HTTP_201_CREATED)
async def create_cliente(
    payload: ClienteCreate,
    service: ClienteService = Depends(get_cliente_service),
) -> ClienteRead:
    return serialize_cliente(unwrap(await service.create(payload)))


@router.patch("/{cliente_id}", response_model=ClienteRead)
async def update_cliente(
    cliente_id: UUID,
    payload: ClienteUpdate,
    service: ClienteService = Depends(get_cliente_service),
) -> ClienteRead:
    return serialize_cliente(unwrap(await service.update(cliente_id, payload)))


@router.put("/{cliente_id}", response_model=ClienteRead)
async def replace_cliente(
    cliente_id: UUID,
    payload: ClienteCreate,
    service: ClienteService = Depends(get_cliente_service),
) -> ClienteRead:
    return serialize_cliente(unwrap(await service.replace(cliente_id, payload)))


@router.delete("/{cliente_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cliente(
    cliente_id: UUID,
    service: ClienteService = Depends(get_cliente_service),
) -> Response:
    unwrap(await service.delete(cliente_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
