from __future__ import annotations

from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import Column, Enum as SAEnum
from sqlmodel import Field

from labfy.models.base import TimestampedModel, UUIDModel


class ContratoStatus(str, Enum):
    AGUARDANDO_GERACAO = "Aguardando Geração"
    AGUARDANDO_REVISAO = "Aguardando Revisão"
    ENVIADO = "Enviado"
    ATIVO = "Ativo"
    CANCELADO = "Cancelado"

    @classmethod
    def parse(cls, value: str | ContratoStatus | None) -> ContratoStatus | None:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# Fluxo esperado do ciclo de vida. Descritivo: o serviço só aplica a trava de
# edição, a menos que ``contrato_strict_transitions`` esteja habilitado.
STATUS_TRANSITIONS: dict[ContratoStatus, frozenset[ContratoStatus]] = {
    ContratoStatus.AGUARDANDO_GERACAO: frozenset({ContratoStatus.AGUARDANDO_REVISAO, ContratoStatus.CANCELADO}),
    ContratoStatus.AGUARDANDO_REVISAO: frozenset({ContratoStatus.ENVIADO, ContratoStatus.CANCELADO}),
    ContratoStatus.ENVIADO: frozenset({ContratoStatus.ATIVO, ContratoStatus.CANCELADO}),
    ContratoStatus.ATIVO: frozenset({ContratoStatus.CANCELADO}),
    ContratoStatus.CANCELADO: frozenset(),
}


def is_transition_allowed(current: ContratoStatus, target: ContratoStatus) -> bool:
    if current == target:
        return True
    return target in STATUS_TRANSITIONS[current]


class Contrato(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "contratos"

    cliente_id: UUID = Field(foreign_key="clientes.id", index=True)
    projeto_id: UUID = Field(foreign_key="projetos.id", index=True)

    valor_mensalidade: Decimal = Field(max_digits=12, decimal_places=2)
    valor_setup: Decimal = Field(max_digits=12, decimal_places=2)
    plano_nome: str = Field(max_length=120)
    prazo_implementacao_dias: int | None = Field(default=None)
    forma_pagamento: str | None = Field(default=None, max_length=60)
    provedor_openai: str | None = Field(default=None, max_length=60)
    observacoes_ia: str | None = Field(default=None)
    assinante_venda_nome: str | None = Field(default=None, max_length=180)
    assinante_venda_email: str | None = Field(default=None, max_length=255)

    status: ContratoStatus = Field(
        default=ContratoStatus.AGUARDANDO_GERACAO,
        sa_column=Column(
            SAEnum(
                ContratoStatus,
                name="contrato_status",
                native_enum=False,
                length=32,
                values_callable=lambda enum: [member.value for member in enum],
            ),
            nullable=False,
            index=True,
        ),
    )

    # chaves mantidas pelos sistemas externos (geração, assinatura, cobrança)
    url_contrato_gerado: str | None = Field(default=None, max_length=1024)
    clicksign_document_key: str | None = Field(default=None, max_length=120)
    asaas_subscription_id: str | None = Field(default=None, max_length=64)
    asaas_setup_payment_id: str | None = Field(default=None, max_length=64)
