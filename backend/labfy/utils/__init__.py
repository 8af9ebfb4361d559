from labfy.utils.cnpj import format_cnpj, normalize_cnpj, validate_cnpj

__all__ = [
    "format_cnpj",
    "normalize_cnpj",
    "validate_cnpj",
]
