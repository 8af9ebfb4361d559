from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from labfy.core.results import ServiceResult
from labfy.db.store import EntityStore, UniqueViolation, contains, eq, ne
from labfy.models.cliente import Cliente
from labfy.models.contrato import Contrato
from labfy.models.projeto import Projeto
from labfy.schemas.cliente import (
    ClienteContratoResumo,
    ClienteCreate,
    ClienteDetail,
    ClienteFilters,
    ClienteRead,
    ClienteUpdate,
)
from labfy.schemas.contrato import ClienteContratoRead
from labfy.schemas.projeto import ProjetoResumo
from labfy.utils.cnpj import format_cnpj, normalize_cnpj

logger = logging.getLogger(__name__)

CNPJ_DUPLICADO = "CNPJ já cadastrado"
CNPJ_DE_OUTRO_CLIENTE = "CNPJ já cadastrado para outro cliente"
CLIENTE_NAO_ENCONTRADO = "Cliente não encontrado"

# campos sobrescritos por replace; ausentes viram nulos
_REPLACEABLE_FIELDS = (
    "razao_social",
    "cnpj",
    "endereco_completo",
    "cidade_estado",
    "assinante_nome",
    "assinante_email",
    "financeiro_nome",
    "financeiro_email",
    "financeiro_telefone",
)


def serialize_cliente(cliente: Cliente) -> ClienteRead:
    read = ClienteRead.model_validate(cliente, from_attributes=True)
    return read.model_copy(update={"cnpj_formatado": format_cnpj(cliente.cnpj)})


class ClienteService:
    def __init__(self, store: EntityStore) -> None:
        self.store = store

    async def list(self, filters: ClienteFilters | None = None) -> ServiceResult[list[Cliente]]:
        filters = filters or ClienteFilters()
        criteria = []
        if filters.cnpj:
            criteria.append(contains("cnpj", normalize_cnpj(filters.cnpj)))
        if filters.razao_social:
            criteria.append(contains("razao_social", filters.razao_social))
        try:
            clientes = await self.store.select(Cliente, *criteria, order_by="created_at", descending=True)
        except Exception:
            logger.exception("Erro ao listar clientes")
            return ServiceResult.internal("Erro ao buscar clientes")
        return ServiceResult.success(clientes)

    async def get(self, cliente_id: UUID | str) -> ServiceResult[ClienteDetail]:
        try:
            cliente = await self.store.get(Cliente, cliente_id)
            if cliente is None:
                return ServiceResult.not_found(CLIENTE_NAO_ENCONTRADO)
            contratos = await self.store.select(
                Contrato,
                eq("cliente_id", cliente.id),
                order_by="created_at",
                descending=True,
            )
        except Exception:
            logger.exception("Erro ao buscar cliente %s", cliente_id)
            return ServiceResult.internal()

        detail = ClienteDetail(
            **serialize_cliente(cliente).model_dump(),
            contratos=[ClienteContratoResumo.model_validate(item) for item in contratos],
        )
        return ServiceResult.success(detail)

    async def create(self, payload: ClienteCreate) -> ServiceResult[Cliente]:
        data = payload.model_dump()
        data["cnpj"] = normalize_cnpj(payload.cnpj)
        try:
            if await self.store.select_one(Cliente, eq("cnpj", data["cnpj"])):
                return ServiceResult.conflict(CNPJ_DUPLICADO)
            cliente = await self.store.insert(Cliente(**data))
        except UniqueViolation:
            # outra requisição gravou o mesmo CNPJ entre a checagem e o insert
            logger.warning("Índice único de CNPJ bloqueou cadastro concorrente de %s", data["cnpj"])
            return ServiceResult.conflict(CNPJ_DUPLICADO)
        except Exception:
            logger.exception("Erro ao criar cliente")
            return ServiceResult.internal("Erro ao criar cliente")
        logger.info("Cliente %s criado", cliente.id)
        return ServiceResult.success(cliente)

    async def update(self, cliente_id: UUID | str, payload: ClienteUpdate) -> ServiceResult[Cliente]:
        patch = payload.model_dump(exclude_unset=True)
        return await self._write(cliente_id, patch, "Erro ao atualizar cliente")

    async def replace(self, cliente_id: UUID | str, payload: ClienteCreate) -> ServiceResult[Cliente]:
        data = payload.model_dump()
        patch = {field: data.get(field) for field in _REPLACEABLE_FIELDS}
        return await self._write(cliente_id, patch, "Erro ao substituir cliente")

    async def _write(self, cliente_id: UUID | str, patch: dict[str, Any], error_message: str) -> ServiceResult[Cliente]:
        try:
            existing = await self.store.get(Cliente, cliente_id)
            if existing is None:
                return ServiceResult.not_found(CLIENTE_NAO_ENCONTRADO)

            if patch.get("cnpj"):
                patch["cnpj"] = normalize_cnpj(patch["cnpj"])
                duplicate = await self.store.select_one(
                    Cliente,
                    eq("cnpj", patch["cnpj"]),
                    ne("id", existing.id),
                )
                if duplicate:
                    return ServiceResult.conflict(CNPJ_DE_OUTRO_CLIENTE)

            updated = await self.store.update(Cliente, existing.id, patch)
        except UniqueViolation:
            return ServiceResult.conflict(CNPJ_DE_OUTRO_CLIENTE)
        except Exception:
            logger.exception("%s %s", error_message, cliente_id)
            return ServiceResult.internal(error_message)

        if updated is None:
            return ServiceResult.not_found(CLIENTE_NAO_ENCONTRADO)
        return ServiceResult.success(updated)

    async def delete(self, cliente_id: UUID | str) -> ServiceResult[None]:
        try:
            existing = await self.store.get(Cliente, cliente_id)
            if existing is None:
                return ServiceResult.not_found(CLIENTE_NAO_ENCONTRADO)

            referencing = await self.store.select(Contrato, eq("cliente_id", existing.id), limit=1)
            if referencing:
                return ServiceResult.conflict("Não é possível excluir cliente com contratos associados")

            if not await self.store.delete(Cliente, existing.id):
                return ServiceResult.not_found(CLIENTE_NAO_ENCONTRADO)
        except Exception:
            logger.exception("Erro ao deletar cliente %s", cliente_id)
            return ServiceResult.internal("Erro ao deletar cliente")
        logger.info("Cliente %s removido", cliente_id)
        return ServiceResult.success()

    async def get_contratos(self, cliente_id: UUID | str) -> ServiceResult[list[ClienteContratoRead]]:
        try:
            cliente = await self.store.get(Cliente, cliente_id)
            if cliente is None:
                return ServiceResult.not_found(CLIENTE_NAO_ENCONTRADO)
            rows = await self.store.select_joined(
                Contrato,
                {"projeto_id": Projeto},
                eq("cliente_id", cliente.id),
                order_by="created_at",
                descending=True,
            )
        except Exception:
            logger.exception("Erro ao buscar contratos do cliente %s", cliente_id)
            return ServiceResult.internal("Erro ao buscar contratos")

        contratos = []
        for contrato, projeto in rows:
            read = ClienteContratoRead.model_validate(contrato)
            if projeto is not None:
                read = read.model_copy(update={"projeto": ProjetoResumo.model_validate(projeto)})
            contratos.append(read)
        return ServiceResult.success(contratos)
