from __future__ import annotations

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from labfy.models.base import TimestampedModel, UUIDModel


class Cliente(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "clientes"
    __table_args__ = (UniqueConstraint("cnpj", name="uq_clientes_cnpj"),)

    razao_social: str = Field(index=True, max_length=255)
    # sempre apenas dígitos
    cnpj: str = Field(max_length=14)

    endereco_completo: str | None = Field(default=None)
    cidade_estado: str | None = Field(default=None, max_length=120)
    assinante_nome: str | None = Field(default=None, max_length=180)
    assinante_email: str | None = Field(default=None, max_length=255)
    financeiro_nome: str | None = Field(default=None, max_length=180)
    financeiro_email: str | None = Field(default=None, max_length=255)
    financeiro_telefone: str | None = Field(default=None, max_length=32)

    asaas_customer_id: str | None = Field(default=None, max_length=64)
