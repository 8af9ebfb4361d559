import pytest

from labfy.utils.cnpj import format_cnpj, normalize_cnpj, validate_cnpj

VALID_CNPJS = ["11222333000181", "11444777000161", "12345678000195", "00000000000191"]


@pytest.mark.parametrize("cnpj", VALID_CNPJS)
def test_validate_accepts_known_cnpjs(cnpj: str) -> None:
    assert validate_cnpj(cnpj) is True
    assert validate_cnpj(format_cnpj(cnpj)) is True


@pytest.mark.parametrize("digit", "0123456789")
def test_validate_rejects_repeated_digits(digit: str) -> None:
    assert validate_cnpj(digit * 14) is False


@pytest.mark.parametrize("value", ["", "1122233300018", "112223330001810", "abc", "11.222.333/0001"])
def test_validate_rejects_wrong_length(value: str) -> None:
    assert validate_cnpj(value) is False


def test_validate_is_sensitive_to_both_check_digits() -> None:
    base = "11222333000181"
    for position in (12, 13):
        for digit in "0123456789":
            if digit == base[position]:
                continue
            mutated = base[:position] + digit + base[position + 1 :]
            assert validate_cnpj(mutated) is False, mutated


def test_normalize_strips_everything_but_digits() -> None:
    assert normalize_cnpj("11.222.333/0001-81") == "11222333000181"
    assert normalize_cnpj(" 11 222 333 0001 81 ") == "11222333000181"
    assert normalize_cnpj(None) == ""


def test_format_cnpj() -> None:
    assert format_cnpj("11222333000181") == "11.222.333/0001-81"
    assert format_cnpj("11.222.333/0001-81") == "11.222.333/0001-81"
    assert format_cnpj("123") == "123"
