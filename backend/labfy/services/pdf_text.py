from __future__ import annotations

import io
from typing import Protocol

from fastapi.concurrency import run_in_threadpool
from pypdf import PdfReader


class TextExtractor(Protocol):
    async def extract_text(self, data: bytes) -> str:
        ...


class PypdfTextExtractor:
    """Extrai o texto de todas as páginas de um PDF com pypdf."""

    async def extract_text(self, data: bytes) -> str:
        return await run_in_threadpool(self._extract, data)

    @staticmethod
    def _extract(data: bytes) -> str:
        reader = PdfReader(io.BytesIO(data))
        pages = [(page.extract_text() or "") for page in reader.pages]
        return "\n".join(pages)
