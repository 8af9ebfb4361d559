from typing import Any, Generator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from labfy.core.config import settings
from labfy.core.logging_setup import logger


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **kwargs: Any) -> Engine:
    connect_args: dict[str, Any] = {}
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        connect_args["check_same_thread"] = False

    new_engine = create_engine(
        database_url,
        echo=settings.debug,
        connect_args=connect_args,
        **kwargs,
    )
    if is_sqlite:
        # SQLite só aplica FOREIGN KEY quando habilitado por conexão
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


engine = build_engine(settings.database_url)


def init_db() -> None:
    # importa os modelos para registrar as tabelas no metadata
    from labfy.db import base  # noqa: F401

    SQLModel.metadata.create_all(bind=engine)
    logger.info("Tabelas verificadas em %s", engine.url.render_as_string(hide_password=True))


def get_session() -> Generator[Session, None, None]:
    with Session(engine, expire_on_commit=False) as session:
        yield session
