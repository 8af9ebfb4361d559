from uuid import uuid4

import pytest
from sqlmodel import Session, select

from labfy.core.results import ErrorKind
from labfy.db.store import SQLModelEntityStore
from labfy.models.cliente import Cliente
from labfy.schemas.cliente import ClienteCreate, ClienteFilters, ClienteUpdate
from labfy.services.cliente import ClienteService

pytestmark = pytest.mark.anyio


def _payload(**overrides) -> ClienteCreate:
    data = {
        "razao_social": "Nova Empresa SA",
        "cnpj": "11.444.777/0001-61",
        "assinante_nome": "Maria Souza",
        "assinante_email": "maria@nova.com.br",
    }
    data.update(overrides)
    return ClienteCreate(**data)


async def test_create_stores_normalized_cnpj(cliente_service: ClienteService) -> None:
    result = await cliente_service.create(_payload())

    assert result.ok
    assert result.data.cnpj == "11444777000161"
    assert result.data.id is not None


async def test_create_rejects_duplicate_cnpj_after_normalization(
    cliente_service: ClienteService, cliente: Cliente, db_session: Session
) -> None:
    result = await cliente_service.create(_payload(cnpj="11.222.333/0001-81", razao_social="Duplicada"))

    assert not result.ok
    assert result.error == ErrorKind.CONFLICT
    assert result.message == "CNPJ já cadastrado"
    rows = db_session.exec(select(Cliente)).all()
    assert len(rows) == 1
    assert rows[0].razao_social == "Empresa Teste LTDA"


async def test_create_maps_unique_violation_to_conflict(store: SQLModelEntityStore, cliente: Cliente) -> None:
    class RacingStore(SQLModelEntityStore):
        async def select_one(self, model, *criteria):
            # simula a janela entre a checagem e o insert
            return None

    service = ClienteService(RacingStore(store.session))
    result = await service.create(_payload(cnpj=cliente.cnpj))

    assert result.error == ErrorKind.CONFLICT


async def test_update_checks_cnpj_of_other_clients(
    cliente_service: ClienteService, cliente: Cliente
) -> None:
    other = (await cliente_service.create(_payload())).data

    conflict = await cliente_service.update(other.id, ClienteUpdate(cnpj="11.222.333/0001-81"))
    assert conflict.error == ErrorKind.CONFLICT
    assert conflict.message == "CNPJ já cadastrado para outro cliente"

    # o próprio CNPJ não conta como duplicata
    same = await cliente_service.update(cliente.id, ClienteUpdate(cnpj="11.222.333/0001-81", cidade_estado="Recife/PE"))
    assert same.ok
    assert same.data.cnpj == "11222333000181"
    assert same.data.cidade_estado == "Recife/PE"


async def test_update_only_touches_given_fields(cliente_service: ClienteService, cliente: Cliente) -> None:
    result = await cliente_service.update(cliente.id, ClienteUpdate(financeiro_nome="João"))

    assert result.ok
    assert result.data.financeiro_nome == "João"
    assert result.data.assinante_email == "assina@empresa.com"


async def test_update_missing_client(cliente_service: ClienteService) -> None:
    result = await cliente_service.update(uuid4(), ClienteUpdate(razao_social="X"))
    assert result.error == ErrorKind.NOT_FOUND


async def test_replace_overwrites_every_field(cliente_service: ClienteService, cliente: Cliente) -> None:
    result = await cliente_service.replace(
        cliente.id,
        ClienteCreate(razao_social="Substituída", cnpj="11222333000181"),
    )

    assert result.ok
    assert result.data.razao_social == "Substituída"
    assert result.data.assinante_email is None


async def test_replace_conflict_and_not_found(cliente_service: ClienteService, cliente: Cliente) -> None:
    other = (await cliente_service.create(_payload())).data

    conflict = await cliente_service.replace(other.id, _payload(cnpj="11222333000181"))
    assert conflict.error == ErrorKind.CONFLICT

    missing = await cliente_service.replace(uuid4(), _payload())
    assert missing.error == ErrorKind.NOT_FOUND


async def test_delete_is_blocked_by_contracts(
    cliente_service: ClienteService, cliente: Cliente, make_contrato, db_session: Session
) -> None:
    make_contrato()

    result = await cliente_service.delete(cliente.id)

    assert result.error == ErrorKind.CONFLICT
    assert db_session.get(Cliente, cliente.id) is not None


async def test_delete_without_contracts(cliente_service: ClienteService, cliente: Cliente, db_session: Session) -> None:
    result = await cliente_service.delete(cliente.id)

    assert result.ok
    db_session.expire_all()
    assert db_session.get(Cliente, cliente.id) is None
    assert (await cliente_service.delete(cliente.id)).error == ErrorKind.NOT_FOUND


async def test_list_filters(cliente_service: ClienteService, cliente: Cliente) -> None:
    await cliente_service.create(_payload())

    by_cnpj = await cliente_service.list(ClienteFilters(cnpj="11.222"))
    assert [item.id for item in by_cnpj.data] == [cliente.id]

    by_name = await cliente_service.list(ClienteFilters(razao_social="nova"))
    assert [item.razao_social for item in by_name.data] == ["Nova Empresa SA"]

    assert len((await cliente_service.list()).data) == 2


async def test_get_includes_contract_summaries(cliente_service: ClienteService, cliente: Cliente, make_contrato) -> None:
    contrato = make_contrato()

    result = await cliente_service.get(cliente.id)

    assert result.ok
    assert result.data.cnpj_formatado == "11.222.333/0001-81"
    assert [item.id for item in result.data.contratos] == [contrato.id]
    assert (await cliente_service.get(uuid4())).error == ErrorKind.NOT_FOUND


async def test_get_contratos_joins_project_name(
    cliente_service: ClienteService, cliente: Cliente, projeto, make_contrato
) -> None:
    make_contrato()

    result = await cliente_service.get_contratos(cliente.id)

    assert result.ok
    assert len(result.data) == 1
    assert result.data[0].projeto.nome_projeto == projeto.nome_projeto
