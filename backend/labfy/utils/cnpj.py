"""
Validação e formatação de CNPJ.

O CNPJ é sempre persistido apenas com dígitos; ``format_cnpj`` existe somente
para exibição.
"""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_cnpj(value: str | None) -> str:
    """Remove todos os caracteres que não são dígitos."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def _check_digit(numbers: str) -> int:
    length = len(numbers)
    total = 0
    pos = length - 7
    for index in range(length, 0, -1):
        total += int(numbers[length - index]) * pos
        pos -= 1
        if pos < 2:
            pos = 9
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def validate_cnpj(value: str | None) -> bool:
    """
    Valida um CNPJ (com ou sem máscara) pelos dígitos verificadores.

    Rejeita entradas que não tenham 14 dígitos e sequências de dígitos
    repetidos como ``11111111111111``.
    """
    cnpj = normalize_cnpj(value)
    if len(cnpj) != 14:
        return False
    if cnpj == cnpj[0] * 14:
        return False

    if _check_digit(cnpj[:12]) != int(cnpj[12]):
        return False
    return _check_digit(cnpj[:13]) == int(cnpj[13])


def format_cnpj(value: str) -> str:
    """Formata um CNPJ para o padrão XX.XXX.XXX/XXXX-XX."""
    cnpj = normalize_cnpj(value)
    if len(cnpj) != 14:
        return value
    return f"{cnpj[:2]}.{cnpj[2:5]}.{cnpj[5:8]}/{cnpj[8:12]}-{cnpj[12:]}"
