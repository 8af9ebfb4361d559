from __future__ import annotations

import html
import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Awaitable, Callable

from labfy.core.config import settings
from labfy.services.pdf_text import TextExtractor
from labfy.services.storage import BlobStore, name_from_locator

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
NO_TEXT_PLACEHOLDER = "Nenhum texto encontrado no PDF"

_LINE_BREAKS = re.compile(r"\n+")

_HTML_SHELL = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Template de Contrato</title>
    <style>
        body {{
            font-family: Arial, sans-serif;
            line-height: 1.6;
            max-width: 800px;
            margin: 0 auto;
            padding: 20px;
        }}
        p {{
            margin: 10px 0;
        }}
    </style>
</head>
<body>
{paragraphs}
</body>
</html>"""


class InvalidTemplate(ValueError):
    """Arquivo de template rejeitado antes de qualquer I/O."""


def escape_line(line: str) -> str:
    # html.escape gera &#x27; para aspas simples; o HTML gravado usa &#039;
    return html.escape(line, quote=True).replace("&#x27;", "&#039;")


def text_to_html(text: str | None) -> str:
    lines = [line.strip() for line in _LINE_BREAKS.split(text or "")]
    lines = [line for line in lines if line]
    if not lines:
        return _HTML_SHELL.format(paragraphs=f"<p>{NO_TEXT_PLACEHOLDER}</p>")
    paragraphs = "\n".join(f"<p>{escape_line(line)}</p>" for line in lines)
    return _HTML_SHELL.format(paragraphs=paragraphs)


@dataclass(frozen=True)
class TemplateUpload:
    filename: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class IngestedTemplate:
    name: str
    locator: str
    html: str


Compensation = Callable[[], Awaitable[Any]]


@dataclass
class Saga:
    """Sequência de passos com ações compensatórias.

    ``run`` executa uma ação e, se ela tiver sucesso, registra a compensação
    correspondente. ``compensate`` desfaz os passos concluídos em ordem
    inversa; falhas de compensação são registradas no log e nunca propagadas.
    """

    name: str
    _compensations: list[tuple[str, Compensation]] = field(default_factory=list)

    async def run(
        self,
        step: str,
        action: Callable[[], Awaitable[Any]],
        compensation: Callable[[Any], Awaitable[Any]] | None = None,
    ) -> Any:
        result = await action()
        if compensation is not None:
            self._compensations.append((step, lambda: compensation(result)))
        return result

    async def compensate(self) -> None:
        if self.pending:
            logger.warning("[%s] Desfazendo %d passo(s) concluído(s)", self.name, self.pending)
        while self._compensations:
            step, undo = self._compensations.pop()
            try:
                await undo()
            except Exception:
                logger.exception("[%s] Falha ao compensar o passo '%s'; recurso pode ter ficado órfão", self.name, step)

    @property
    def pending(self) -> int:
        return len(self._compensations)


class DocumentIngestionPipeline:
    """Upload de templates PDF, extração de texto e limpeza dos blobs."""

    def __init__(
        self,
        blob_store: BlobStore,
        extractor: TextExtractor,
        *,
        bucket: str | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self.blob_store = blob_store
        self.extractor = extractor
        self.bucket = bucket or settings.bucket_templates
        self.max_bytes = max_bytes if max_bytes is not None else settings.template_max_bytes

    def validate(self, upload: TemplateUpload) -> None:
        if (upload.content_type or "").lower() != PDF_CONTENT_TYPE:
            raise InvalidTemplate("Apenas arquivos PDF são permitidos")
        if upload.size > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise InvalidTemplate(f"Arquivo muito grande. Máximo {limit_mb}MB")

    @staticmethod
    def build_name(filename: str) -> str:
        original = PurePath(filename.replace("\\", "/")).name or "template.pdf"
        return f"template-{int(time.time() * 1000)}-{original}"

    async def ingest(self, upload: TemplateUpload, saga: Saga) -> IngestedTemplate:
        """Envia o PDF e gera o HTML. O upload fica registrado na saga."""
        name = self.build_name(upload.filename)
        locator = await saga.run(
            f"upload {name}",
            lambda: self.blob_store.put(self.bucket, name, upload.data, PDF_CONTENT_TYPE),
            lambda _locator: self.blob_store.delete(self.bucket, name),
        )
        text = await saga.run("extração de texto", lambda: self.extractor.extract_text(upload.data))
        logger.info("Template %s enviado (%d bytes)", name, upload.size)
        return IngestedTemplate(name=name, locator=locator, html=text_to_html(text))

    async def discard(self, locator: str | None) -> bool:
        """Remove um blob existente sem propagar falhas."""
        if not locator:
            return False
        name = name_from_locator(locator)
        try:
            await self.blob_store.delete(self.bucket, name)
        except Exception:
            logger.exception("Erro ao deletar arquivo %s do Storage", name)
            return False
        return True
