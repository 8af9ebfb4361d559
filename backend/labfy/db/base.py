# noqa: F401 to ensure models are imported for metadata
from labfy.models.cliente import Cliente
from labfy.models.contrato import Contrato
from labfy.models.projeto import Projeto

__all__ = [
    "Cliente",
    "Contrato",
    "Projeto",
]
