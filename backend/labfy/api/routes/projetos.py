from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from labfy.api.deps import get_projeto_service, unwrap
from labfy.schemas.projeto import ProjetoCreate, ProjetoRead, ProjetoUpdate
from labfy.services.ingestion import TemplateUpload
from labfy.services.projeto import ProjetoService

router = APIRouter(prefix="/projetos", tags=["projetos"])


async def _read_upload(file: UploadFile | None) -> TemplateUpload | None:
    if file is None or not file.filename:
        return None
    data = await file.read()
    return TemplateUpload(filename=file.filename, content_type=file.content_type, data=data)


@router.get("", response_model=List[ProjetoRead])
async def list_projetos(service: ProjetoService = Depends(get_projeto_service)) -> List[ProjetoRead]:
    projetos = unwrap(await service.list())
    return [ProjetoRead.model_validate(projeto) for projeto in projetos]


@router.get("/{projeto_id}", response_model=ProjetoRead)
async def get_projeto(
    projeto_id: UUID,
    service: ProjetoService = Depends(get_projeto_service),
) -> ProjetoRead:
    return ProjetoRead.model_validate(unwrap(await service.get(projeto_id)))


@router.post("", response_model=ProjetoRead, status_code=status.HTTP_201_CREATED)
async def create_projeto(
    nome_projeto: str = Form(..., min_length=1, max_length=180),
    descricao: str | None = Form(default=None),
    template: UploadFile | None = File(default=None),
    service: ProjetoService = Depends(get_projeto_service),
) -> ProjetoRead:
    payload = ProjetoCreate(nome_projeto=nome_projeto, descricao=descricao)
    upload = await _read_upload(template)
    return ProjetoRead.model_validate(unwrap(await service.create(payload, upload)))


@router.patch("/{projeto_id}", response_model=ProjetoRead)
async def update_projeto(
    projeto_id: UUID,
    nome_projeto: str | None = Form(default=None, min_length=1, max_length=180),
    descricao: str | None = Form(default=None),
    template: UploadFile | None = File(default=None),
    service: ProjetoService = Depends(get_projeto_service),
) -> ProjetoRead:
    fields = {"nome_projeto": nome_projeto, "descricao": descricao}
    payload = ProjetoUpdate(**{key: value for key, value in fields.items() if value is not None})
    upload = await _read_upload(template)
    return ProjetoRead.model_validate(unwrap(await service.update(projeto_id, payload, upload)))


@router.delete("/{projeto_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_projeto(
    projeto_id: UUID,
    service: ProjetoService = Depends(get_projeto_service),
) -> Response:
    unwrap(await service.delete(projeto_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
