from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from labfy.core.results import ServiceResult
from labfy.db.store import EntityStore, eq
from labfy.models.contrato import Contrato
from labfy.models.projeto import Projeto
from labfy.schemas.projeto import ProjetoCreate, ProjetoUpdate
from labfy.services.ingestion import DocumentIngestionPipeline, InvalidTemplate, Saga, TemplateUpload

logger = logging.getLogger(__name__)

PROJETO_NAO_ENCONTRADO = "Projeto não encontrado"


class ProjetoService:
    def __init__(self, store: EntityStore, pipeline: DocumentIngestionPipeline) -> None:
        self.store = store
        self.pipeline = pipeline

    async def list(self) -> ServiceResult[list[Projeto]]:
        try:
            projetos = await self.store.select(Projeto, order_by="created_at", descending=True)
        except Exception:
            logger.exception("Erro ao listar projetos")
            return ServiceResult.internal("Erro ao buscar projetos")
        return ServiceResult.success(projetos)

    async def get(self, projeto_id: UUID | str) -> ServiceResult[Projeto]:
        try:
            projeto = await self.store.get(Projeto, projeto_id)
        except Exception:
            logger.exception("Erro ao buscar projeto %s", projeto_id)
            return ServiceResult.internal()
        if projeto is None:
            return ServiceResult.not_found(PROJETO_NAO_ENCONTRADO)
        return ServiceResult.success(projeto)

    async def create(self, payload: ProjetoCreate, upload: TemplateUpload | None = None) -> ServiceResult[Projeto]:
        data: dict[str, Any] = payload.model_dump()
        if upload is not None:
            try:
                self.pipeline.validate(upload)
            except InvalidTemplate as exc:
                return ServiceResult.invalid(str(exc))

        saga = Saga("criar projeto")
        try:
            if upload is not None:
                template = await self.pipeline.ingest(upload, saga)
                data["template_pdf_path"] = template.locator
                data["template_html"] = template.html
            projeto = await self.store.insert(Projeto(**data))
        except Exception:
            logger.exception("Erro ao criar projeto")
            await saga.compensate()
            return ServiceResult.internal("Erro ao criar projeto")
        logger.info("Projeto %s criado", projeto.id)
        return ServiceResult.success(projeto)

    async def update(
        self,
        projeto_id: UUID | str,
        payload: ProjetoUpdate,
        upload: TemplateUpload | None = None,
    ) -> ServiceResult[Projeto]:
        patch: dict[str, Any] = payload.model_dump(exclude_unset=True)
        saga = Saga("atualizar projeto")
        try:
            existing = await self.store.get(Projeto, projeto_id)
            if existing is None:
                return ServiceResult.not_found(PROJETO_NAO_ENCONTRADO)

            if upload is not None:
                try:
                    self.pipeline.validate(upload)
                except InvalidTemplate as exc:
                    return ServiceResult.invalid(str(exc))

                # o template antigo é descartado mesmo que o novo falhe depois
                if existing.template_pdf_path:
                    await self.pipeline.discard(existing.template_pdf_path)

                template = await self.pipeline.ingest(upload, saga)
                patch["template_pdf_path"] = template.locator
                patch["template_html"] = template.html

            updated = await self.store.update(Projeto, existing.id, patch)
        except Exception:
            logger.exception("Erro ao atualizar projeto %s", projeto_id)
            await saga.compensate()
            return ServiceResult.internal("Erro ao atualizar projeto")

        if updated is None:
            await saga.compensate()
            return ServiceResult.not_found(PROJETO_NAO_ENCONTRADO)
        return ServiceResult.success(updated)

    async def delete(self, projeto_id: UUID | str) -> ServiceResult[None]:
        try:
            existing = await self.store.get(Projeto, projeto_id)
            if existing is None:
                return ServiceResult.not_found(PROJETO_NAO_ENCONTRADO)

            referencing = await self.store.select(Contrato, eq("projeto_id", existing.id), limit=1)
            if referencing:
                return ServiceResult.conflict("Não é possível excluir projeto com contratos associados")

            await self.pipeline.discard(existing.template_pdf_path)

            if not await self.store.delete(Projeto, existing.id):
                return ServiceResult.not_found(PROJETO_NAO_ENCONTRADO)
        except Exception:
            logger.exception("Erro ao deletar projeto %s", projeto_id)
            return ServiceResult.internal("Erro ao deletar projeto")
        logger.info("Projeto %s removido", projeto_id)
        return ServiceResult.success()
