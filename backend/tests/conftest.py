from __future__ import annotations

import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from labfy.api.deps import get_blob, get_db, get_extractor
from labfy.db import base  # noqa: F401
from labfy.db.session import build_engine
from labfy.db.store import SQLModelEntityStore
from labfy.main import app
from labfy.models.cliente import Cliente
from labfy.models.contrato import Contrato, ContratoStatus
from labfy.models.projeto import Projeto
from labfy.services.cliente import ClienteService
from labfy.services.contrato import ContratoService
from labfy.services.ingestion import DocumentIngestionPipeline
from labfy.services.projeto import ProjetoService
from labfy.services.storage import LocalBlobStore

CNPJ_VALIDO = "11222333000181"


class FakeBlobStore:
    """BlobStore em memória que registra cada chamada."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.calls: list[tuple[str, str, str]] = []
        self.fail_put = False
        self.fail_delete = False

    async def put(self, bucket: str, name: str, data: bytes, content_type: str = "application/pdf") -> str:
        self.calls.append(("put", bucket, name))
        if self.fail_put:
            raise RuntimeError("upload indisponível")
        self.objects[(bucket, name)] = data
        return f"https://storage.test/{bucket}/{name}"

    async def delete(self, bucket: str, name: str) -> None:
        self.calls.append(("delete", bucket, name))
        if self.fail_delete:
            raise RuntimeError("storage indisponível")
        self.objects.pop((bucket, name), None)

    def deleted_names(self) -> list[str]:
        return [name for op, _, name in self.calls if op == "delete"]

    def put_names(self) -> list[str]:
        return [name for op, _, name in self.calls if op == "put"]


class FakeExtractor:
    def __init__(self, text: str = "CONTRATO DE PRESTAÇÃO\n\nCláusula 1 <objeto> & \"escopo\"\n") -> None:
        self.text = text
        self.fail = False

    async def extract_text(self, data: bytes) -> str:
        if self.fail:
            raise RuntimeError("PDF corrompido")
        return self.text


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def db_engine(tmp_path):
    db_path = tmp_path / f"test_{uuid.uuid4().hex}.db"
    engine = build_engine(f"sqlite:///{db_path}")
    SQLModel.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(db_engine) -> Session:
    with Session(db_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture()
def store(db_session: Session) -> SQLModelEntityStore:
    return SQLModelEntityStore(db_session)


@pytest.fixture()
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture()
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture()
def pipeline(blob_store: FakeBlobStore, extractor: FakeExtractor) -> DocumentIngestionPipeline:
    return DocumentIngestionPipeline(blob_store, extractor, bucket="templates", max_bytes=10 * 1024 * 1024)


@pytest.fixture()
def cliente_service(store: SQLModelEntityStore) -> ClienteService:
    return ClienteService(store)


@pytest.fixture()
def contrato_service(store: SQLModelEntityStore) -> ContratoService:
    return ContratoService(store, strict_transitions=False)


@pytest.fixture()
def projeto_service(store: SQLModelEntityStore, pipeline: DocumentIngestionPipeline) -> ProjetoService:
    return ProjetoService(store, pipeline)


@pytest.fixture()
def cliente(db_session: Session) -> Cliente:
    row = Cliente(razao_social="Empresa Teste LTDA", cnpj=CNPJ_VALIDO, assinante_email="assina@empresa.com")
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def projeto(db_session: Session) -> Projeto:
    row = Projeto(nome_projeto="Chatbot Atendimento", descricao="Template padrão")
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    return row


@pytest.fixture()
def make_contrato(db_session: Session, cliente: Cliente, projeto: Projeto):
    def _make(status: ContratoStatus = ContratoStatus.AGUARDANDO_GERACAO, **overrides) -> Contrato:
        data = {
            "cliente_id": cliente.id,
            "projeto_id": projeto.id,
            "valor_mensalidade": Decimal("1500.00"),
            "valor_setup": Decimal("3000.00"),
            "plano_nome": "Plano Pro",
            "status": status,
        }
        data.update(overrides)
        row = Contrato(**data)
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _make


@pytest.fixture()
def client(db_engine, tmp_path, extractor: FakeExtractor) -> TestClient:
    local_store = LocalBlobStore(base_dir=tmp_path / "storage", public_base_url="http://testserver/storage")

    def _get_db():
        with Session(db_engine, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_blob] = lambda: local_store
    app.dependency_overrides[get_extractor] = lambda: extractor
    yield TestClient(app)
    app.dependency_overrides.clear()
