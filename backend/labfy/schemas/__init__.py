from labfy.schemas import cliente, common, contrato, projeto

__all__ = [
    "cliente",
    "common",
    "contrato",
    "projeto",
]
