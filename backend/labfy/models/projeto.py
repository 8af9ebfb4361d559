from __future__ import annotations

from sqlmodel import Field

from labfy.models.base import TimestampedModel, UUIDModel


class Projeto(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "projetos"

    nome_projeto: str = Field(index=True, max_length=180)
    descricao: str | None = Field(default=None)
    # preenchidos juntos ou ambos ausentes
    template_pdf_path: str | None = Field(default=None, max_length=1024)
    template_html: str | None = Field(default=None)
