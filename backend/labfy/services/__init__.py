from labfy.services.cliente import ClienteService
from labfy.services.contrato import ContratoService
from labfy.services.ingestion import DocumentIngestionPipeline
from labfy.services.projeto import ProjetoService

__all__ = [
    "ClienteService",
    "ContratoService",
    "DocumentIngestionPipeline",
    "ProjetoService",
]
