from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from labfy.schemas.common import IDModel, Timestamped


class ProjetoCreate(BaseModel):
    nome_projeto: str = Field(min_length=1, max_length=180)
    descricao: str | None = None


class ProjetoUpdate(BaseModel):
    nome_projeto: str | None = Field(default=None, min_length=1, max_length=180)
    descricao: str | None = None

    @field_validator("nome_projeto")
    @classmethod
    def not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Campo obrigatório não pode ser nulo")
        return value


class ProjetoRead(IDModel, Timestamped):
    nome_projeto: str
    descricao: str | None = None
    template_pdf_path: str | None = None
    template_html: str | None = None


class ProjetoResumo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    nome_projeto: str
