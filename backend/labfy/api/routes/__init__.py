from . import clientes, contratos, health, projetos, webhooks

__all__ = [
    "clientes",
    "contratos",
    "health",
    "projetos",
    "webhooks",
]
