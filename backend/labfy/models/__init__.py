from labfy.models.cliente import Cliente
from labfy.models.contrato import Contrato, ContratoStatus
from labfy.models.projeto import Projeto

__all__ = [
    "Cliente",
    "Contrato",
    "ContratoStatus",
    "Projeto",
]
