from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from labfy.models.contrato import ContratoStatus
from labfy.schemas.cliente import ClienteResumo
from labfy.schemas.common import IDModel, Timestamped
from labfy.schemas.projeto import ProjetoResumo


class ContratoCreate(BaseModel):
    cliente_id: UUID
    projeto_id: UUID
    valor_mensalidade: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    valor_setup: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    plano_nome: str = Field(min_length=1, max_length=120)
    prazo_implementacao_dias: int | None = Field(default=None, ge=0)
    forma_pagamento: str | None = None
    provedor_openai: str | None = None
    observacoes_ia: str | None = None
    assinante_venda_nome: str | None = None
    assinante_venda_email: EmailStr | None = None


class ContratoUpdate(BaseModel):
    cliente_id: UUID | None = None
    projeto_id: UUID | None = None
    valor_mensalidade: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    valor_setup: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    plano_nome: str | None = Field(default=None, min_length=1, max_length=120)
    prazo_implementacao_dias: int | None = Field(default=None, ge=0)
    forma_pagamento: str | None = None
    provedor_openai: str | None = None
    observacoes_ia: str | None = None
    assinante_venda_nome: str | None = None
    assinante_venda_email: EmailStr | None = None
    # validado pelo serviço contra os cinco status conhecidos
    status: str | None = None

    @field_validator("cliente_id", "projeto_id", "valor_mensalidade", "valor_setup", "plano_nome", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Campo obrigatório não pode ser nulo")
        return value


class ContratoFilters(BaseModel):
    status: ContratoStatus | None = None
    cliente_id: UUID | None = None
    projeto_id: UUID | None = None


class ContratoRead(IDModel, Timestamped):
    cliente_id: UUID
    projeto_id: UUID
    valor_mensalidade: Decimal
    valor_setup: Decimal
    plano_nome: str
    prazo_implementacao_dias: int | None = None
    forma_pagamento: str | None = None
    provedor_openai: str | None = None
    observacoes_ia: str | None = None
    assinante_venda_nome: str | None = None
    assinante_venda_email: str | None = None
    status: ContratoStatus
    url_contrato_gerado: str | None = None
    clicksign_document_key: str | None = None
    asaas_subscription_id: str | None = None
    asaas_setup_payment_id: str | None = None


class ContratoWithRelations(ContratoRead):
    cliente: ClienteResumo | None = None
    projeto: ProjetoResumo | None = None


class ClienteContratoRead(ContratoRead):
    projeto: ProjetoResumo | None = None
