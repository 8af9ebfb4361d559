from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from labfy.core.config import settings
from labfy.core.results import ServiceResult
from labfy.db.store import EntityStore, eq
from labfy.models.cliente import Cliente
from labfy.models.contrato import Contrato, ContratoStatus, is_transition_allowed
from labfy.models.projeto import Projeto
from labfy.schemas.cliente import ClienteResumo
from labfy.schemas.contrato import ContratoCreate, ContratoFilters, ContratoUpdate, ContratoWithRelations
from labfy.schemas.projeto import ProjetoResumo

logger = logging.getLogger(__name__)

CONTRATO_NAO_ENCONTRADO = "Contrato não encontrado"
EDICAO_BLOQUEADA = 'Contrato só pode ser editado quando estiver com status "Aguardando Geração"'

_RELATIONS = {"cliente_id": Cliente, "projeto_id": Projeto}


def _with_relations(contrato: Contrato, cliente: Cliente | None, projeto: Projeto | None) -> ContratoWithRelations:
    read = ContratoWithRelations.model_validate(contrato)
    return read.model_copy(
        update={
            "cliente": ClienteResumo.model_validate(cliente) if cliente is not None else None,
            "projeto": ProjetoResumo.model_validate(projeto) if projeto is not None else None,
        }
    )


class ContratoService:
    """
    Contratos e o ciclo de vida do status.

    Só a trava de edição é aplicada: fora de "Aguardando Geração" apenas o
    status pode mudar. O grafo de ``STATUS_TRANSITIONS`` é verificado somente
    quando ``strict_transitions`` está ligado; caso contrário, mudanças fora
    do fluxo são apenas registradas no log.
    """

    def __init__(self, store: EntityStore, *, strict_transitions: bool | None = None) -> None:
        self.store = store
        self.strict_transitions = (
            settings.contrato_strict_transitions if strict_transitions is None else strict_transitions
        )

    async def list(self, filters: ContratoFilters | None = None) -> ServiceResult[list[ContratoWithRelations]]:
        filters = filters or ContratoFilters()
        criteria = []
        if filters.status is not None:
            criteria.append(eq("status", filters.status))
        if filters.cliente_id is not None:
            criteria.append(eq("cliente_id", filters.cliente_id))
        if filters.projeto_id is not None:
            criteria.append(eq("projeto_id", filters.projeto_id))
        try:
            rows = await self.store.select_joined(
                Contrato, _RELATIONS, *criteria, order_by="created_at", descending=True
            )
        except Exception:
            logger.exception("Erro ao listar contratos")
            return ServiceResult.internal("Erro ao buscar contratos")
        return ServiceResult.success([_with_relations(*row) for row in rows])

    async def get(self, contrato_id: UUID | str) -> ServiceResult[ContratoWithRelations]:
        try:
            existing = await self.store.get(Contrato, contrato_id)
            if existing is None:
                return ServiceResult.not_found(CONTRATO_NAO_ENCONTRADO)
            rows = await self.store.select_joined(Contrato, _RELATIONS, eq("id", existing.id))
        except Exception:
            logger.exception("Erro ao buscar contrato %s", contrato_id)
            return ServiceResult.internal()
        if not rows:
            return ServiceResult.not_found(CONTRATO_NAO_ENCONTRADO)
        return ServiceResult.success(_with_relations(*rows[0]))

    async def create(self, payload: ContratoCreate) -> ServiceResult[Contrato]:
        data = payload.model_dump()
        try:
            missing = await self._check_references(data)
            if missing is not None:
                return missing
            data["status"] = ContratoStatus.AGUARDANDO_GERACAO
            contrato = await self.store.insert(Contrato(**data))
        except Exception:
            logger.exception("Erro ao criar contrato")
            return ServiceResult.internal("Erro ao criar contrato")
        logger.info("Contrato %s criado para o cliente %s", contrato.id, contrato.cliente_id)
        return ServiceResult.success(contrato)

    async def update(self, contrato_id: UUID | str, payload: ContratoUpdate) -> ServiceResult[Contrato]:
        patch: dict[str, Any] = payload.model_dump(exclude_unset=True)
        try:
            existing = await self.store.get(Contrato, contrato_id)
            if existing is None:
                return ServiceResult.not_found(CONTRATO_NAO_ENCONTRADO)

            current = ContratoStatus(existing.status)
            if current != ContratoStatus.AGUARDANDO_GERACAO and any(key != "status" for key in patch):
                return ServiceResult.forbidden(EDICAO_BLOQUEADA)

            missing = await self._check_references(patch)
            if missing is not None:
                return missing

            if "status" in patch:
                target = ContratoStatus.parse(patch["status"])
                if target is None:
                    return ServiceResult.invalid("Status inválido")
                if not is_transition_allowed(current, target):
                    if self.strict_transitions:
                        return ServiceResult.forbidden(f'Transição de "{current.value}" para "{target.value}" não permitida')
                    logger.warning(
                        "Contrato %s mudou de '%s' para '%s' fora do fluxo previsto",
                        existing.id,
                        current.value,
                        target.value,
                    )
                patch["status"] = target

            updated = await self.store.update(Contrato, existing.id, patch)
        except Exception:
            logger.exception("Erro ao atualizar contrato %s", contrato_id)
            return ServiceResult.internal("Erro ao atualizar contrato")

        if updated is None:
            return ServiceResult.not_found(CONTRATO_NAO_ENCONTRADO)
        return ServiceResult.success(updated)

    async def delete(self, contrato_id: UUID | str) -> ServiceResult[None]:
        # contratos são registros folha: nenhuma checagem de dependentes
        try:
            deleted = await self.store.delete(Contrato, contrato_id)
        except Exception:
            logger.exception("Erro ao deletar contrato %s", contrato_id)
            return ServiceResult.internal("Erro ao deletar contrato")
        if not deleted:
            return ServiceResult.not_found(CONTRATO_NAO_ENCONTRADO)
        logger.info("Contrato %s removido", contrato_id)
        return ServiceResult.success()

    async def _check_references(self, data: dict[str, Any]) -> ServiceResult[Contrato] | None:
        if "cliente_id" in data and await self.store.get(Cliente, data["cliente_id"]) is None:
            return ServiceResult.not_found("Cliente não encontrado")
        if "projeto_id" in data and await self.store.get(Projeto, data["projeto_id"]) is None:
            return ServiceResult.not_found("Projeto não encontrado")
        return None
