from typing import Annotated, Generator

from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from labfy.core.results import ErrorKind, ServiceResult
from labfy.db.session import get_session
from labfy.db.store import SQLModelEntityStore
from labfy.services.cliente import ClienteService
from labfy.services.contrato import ContratoService
from labfy.services.ingestion import DocumentIngestionPipeline
from labfy.services.pdf_text import PypdfTextExtractor, TextExtractor
from labfy.services.projeto import ProjetoService
from labfy.services.storage import BlobStore, get_blob_store

STATUS_BY_ERROR: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_db() -> Generator[Session, None, None]:
    yield from get_session()


def get_store(session: Annotated[Session, Depends(get_db)]) -> SQLModelEntityStore:
    return SQLModelEntityStore(session)


def get_blob() -> BlobStore:
    return get_blob_store()


def get_extractor() -> TextExtractor:
    return PypdfTextExtractor()


def get_cliente_service(store: Annotated[SQLModelEntityStore, Depends(get_store)]) -> ClienteService:
    return ClienteService(store)


def get_contrato_service(store: Annotated[SQLModelEntityStore, Depends(get_store)]) -> ContratoService:
    return ContratoService(store)


def get_projeto_service(
    store: Annotated[SQLModelEntityStore, Depends(get_store)],
    blob_store: Annotated[BlobStore, Depends(get_blob)],
    extractor: Annotated[TextExtractor, Depends(get_extractor)],
) -> ProjetoService:
    return ProjetoService(store, DocumentIngestionPipeline(blob_store, extractor))


def unwrap(result: ServiceResult):
    """Devolve os dados do resultado ou converte a falha em HTTPException."""
    if result.ok:
        return result.data
    status_code = STATUS_BY_ERROR.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    raise HTTPException(
        status_code=status_code,
        detail={"error": result.message, "code": result.error.value if result.error else None},
    )
