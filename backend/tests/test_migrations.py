from pathlib import Path

import sqlalchemy as sa
from alembic import command
from alembic.config import Config
from sqlmodel import SQLModel

from labfy.db import base  # noqa: F401

ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "alembic"


def _config(url: str) -> Config:
    # sem arquivo .ini: evita que fileConfig reconfigure o logging dos testes
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_upgrade_creates_schema(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    url = f"sqlite:///{tmp_path / 'migrations.db'}"

    command.upgrade(_config(url), "head")

    engine = sa.create_engine(url)
    inspector = sa.inspect(engine)
    assert {"clientes", "projetos", "contratos"} <= set(inspector.get_table_names())
    uniques = inspector.get_unique_constraints("clientes")
    assert any(item["column_names"] == ["cnpj"] for item in uniques)
    foreign = {tuple(fk["constrained_columns"]): fk["referred_table"] for fk in inspector.get_foreign_keys("contratos")}
    assert foreign == {("cliente_id",): "clientes", ("projeto_id",): "projetos"}
    engine.dispose()


def test_downgrade_drops_tables(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = _config(url)

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    engine = sa.create_engine(url)
    assert set(sa.inspect(engine).get_table_names()) <= {"alembic_version"}
    engine.dispose()


def test_migration_indexes_match_model_metadata(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    command.upgrade(_config(url), "head")

    engine = sa.create_engine(url)
    inspector = sa.inspect(engine)
    for table in ("clientes", "projetos", "contratos"):
        declared = {index.name for index in SQLModel.metadata.tables[table].indexes}
        migrated = {index["name"] for index in inspector.get_indexes(table)}
        assert migrated == declared, table
    engine.dispose()
