from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from labfy.models.contrato import ContratoStatus
from labfy.schemas.common import IDModel, Timestamped
from labfy.utils.cnpj import validate_cnpj


class ClienteBase(BaseModel):
    razao_social: str = Field(min_length=1, max_length=255)
    cnpj: str
    endereco_completo: str | None = None
    cidade_estado: str | None = None
    assinante_nome: str | None = None
    assinante_email: EmailStr | None = None
    financeiro_nome: str | None = None
    financeiro_email: EmailStr | None = None
    financeiro_telefone: str | None = None

    @field_validator("cnpj")
    @classmethod
    def check_cnpj(cls, value: str) -> str:
        if not validate_cnpj(value):
            raise ValueError("CNPJ inválido")
        return value


class ClienteCreate(ClienteBase):
    pass


class ClienteUpdate(BaseModel):
    razao_social: str | None = Field(default=None, min_length=1, max_length=255)
    cnpj: str | None = None
    endereco_completo: str | None = None
    cidade_estado: str | None = None
    assinante_nome: str | None = None
    assinante_email: EmailStr | None = None
    financeiro_nome: str | None = None
    financeiro_email: EmailStr | None = None
    financeiro_telefone: str | None = None

    @field_validator("cnpj", "razao_social")
    @classmethod
    def not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Campo obrigatório não pode ser nulo")
        return value

    @field_validator("cnpj")
    @classmethod
    def check_cnpj(cls, value: str) -> str:
        if not validate_cnpj(value):
            raise ValueError("CNPJ inválido")
        return value


class ClienteFilters(BaseModel):
    cnpj: str | None = None
    razao_social: str | None = None


class ClienteRead(IDModel, Timestamped):
    razao_social: str
    cnpj: str
    cnpj_formatado: str | None = None
    endereco_completo: str | None = None
    cidade_estado: str | None = None
    assinante_nome: str | None = None
    assinante_email: str | None = None
    financeiro_nome: str | None = None
    financeiro_email: str | None = None
    financeiro_telefone: str | None = None
    asaas_customer_id: str | None = None


class ClienteContratoResumo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    projeto_id: UUID
    status: ContratoStatus
    valor_mensalidade: Decimal
    created_at: datetime


class ClienteDetail(ClienteRead):
    contratos: list[ClienteContratoResumo] = []


class ClienteResumo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    razao_social: str
    cnpj: str
