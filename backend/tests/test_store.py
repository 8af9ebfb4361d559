from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from labfy.db.store import SQLModelEntityStore, StoreError, UniqueViolation, contains, eq, ne
from labfy.models.cliente import Cliente
from labfy.models.contrato import Contrato, ContratoStatus
from labfy.models.projeto import Projeto

pytestmark = pytest.mark.anyio


async def test_insert_select_and_get(store: SQLModelEntityStore) -> None:
    inserted = await store.insert(Cliente(razao_social="ACME Comércio", cnpj="11222333000181"))

    assert await store.get(Cliente, inserted.id) is not None
    assert await store.get(Cliente, str(inserted.id)) is not None
    assert await store.get(Cliente, "nao-e-uuid") is None

    found = await store.select(Cliente, contains("razao_social", "acme"))
    assert [row.id for row in found] == [inserted.id]
    assert await store.select_one(Cliente, eq("cnpj", "11222333000181")) is not None
    assert await store.select_one(Cliente, eq("cnpj", "11222333000181"), ne("id", inserted.id)) is None


async def test_unique_cnpj_is_enforced_by_the_database(store: SQLModelEntityStore) -> None:
    await store.insert(Cliente(razao_social="Primeira", cnpj="11222333000181"))

    with pytest.raises(UniqueViolation):
        await store.insert(Cliente(razao_social="Segunda", cnpj="11222333000181"))

    # a sessão continua utilizável após o rollback
    assert len(await store.select(Cliente)) == 1


async def test_foreign_keys_are_enforced(store: SQLModelEntityStore) -> None:
    contrato = Contrato(
        cliente_id=uuid4(),
        projeto_id=uuid4(),
        valor_mensalidade=Decimal("10.00"),
        valor_setup=Decimal("0.00"),
        plano_nome="Básico",
    )
    with pytest.raises(StoreError) as exc_info:
        await store.insert(contrato)
    assert not isinstance(exc_info.value, UniqueViolation)


async def test_update_and_delete(store: SQLModelEntityStore) -> None:
    projeto = await store.insert(Projeto(nome_projeto="Original"))

    updated = await store.update(Projeto, projeto.id, {"nome_projeto": "Renomeado"})
    assert updated is not None
    assert updated.nome_projeto == "Renomeado"
    assert updated.updated_at is not None

    assert await store.update(Projeto, uuid4(), {"nome_projeto": "X"}) is None
    assert await store.delete(Projeto, projeto.id) is True
    assert await store.delete(Projeto, projeto.id) is False


async def test_select_joined_returns_related_rows(store: SQLModelEntityStore, make_contrato, cliente, projeto) -> None:
    contrato = make_contrato(status=ContratoStatus.ENVIADO)

    rows = await store.select_joined(
        Contrato,
        {"cliente_id": Cliente, "projeto_id": Projeto},
        eq("status", ContratoStatus.ENVIADO),
    )

    assert len(rows) == 1
    row_contrato, row_cliente, row_projeto = rows[0]
    assert row_contrato.id == contrato.id
    assert row_cliente.razao_social == cliente.razao_social
    assert row_projeto.nome_projeto == projeto.nome_projeto


async def test_select_with_limit_and_order(store: SQLModelEntityStore) -> None:
    for name in ("A", "B", "C"):
        await store.insert(Projeto(nome_projeto=name))

    ordered = await store.select(Projeto, order_by="nome_projeto", descending=True)
    assert [row.nome_projeto for row in ordered] == ["C", "B", "A"]
    assert len(await store.select(Projeto, limit=1)) == 1


@pytest.mark.parametrize("model", [Cliente, Projeto, Contrato])
def test_timestamp_columns_are_timezone_aware(model) -> None:
    columns = model.__table__.c
    assert columns.created_at.type.timezone is True
    assert columns.updated_at.type.timezone is True


async def test_timestamps_are_written_in_utc(store: SQLModelEntityStore) -> None:
    row = Cliente(razao_social="Fuso LTDA", cnpj="11222333000181")
    assert row.created_at.utcoffset() == timedelta(0)

    inserted = await store.insert(row)
    updated = await store.update(Cliente, inserted.id, {"cidade_estado": "Natal/RN"})

    assert updated is not None
    assert updated.updated_at is not None
    assert updated.updated_at >= inserted.created_at.replace(tzinfo=updated.updated_at.tzinfo)
