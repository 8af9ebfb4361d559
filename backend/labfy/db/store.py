from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Protocol, Sequence, TypeVar
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, func, select

from labfy.models.base import utcnow

ModelT = TypeVar("ModelT", bound=SQLModel)

_UNIQUE_VIOLATION_PGCODE = "23505"


class StoreError(Exception):
    """Falha do armazenamento relacional (conexão, constraint, etc.)."""


class UniqueViolation(StoreError):
    """Violação de índice único detectada pelo próprio banco."""


@dataclass(frozen=True)
class Criterion:
    field: str
    value: Any
    op: Literal["eq", "ne", "contains"] = "eq"


def eq(field: str, value: Any) -> Criterion:
    return Criterion(field, value, "eq")


def ne(field: str, value: Any) -> Criterion:
    return Criterion(field, value, "ne")


def contains(field: str, value: str) -> Criterion:
    return Criterion(field, value, "contains")


def as_uuid(value: UUID | str | None) -> UUID | None:
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


class EntityStore(Protocol):
    async def select(
        self,
        model: type[ModelT],
        *criteria: Criterion,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[ModelT]:
        ...

    async def select_one(self, model: type[ModelT], *criteria: Criterion) -> ModelT | None:
        ...

    async def get(self, model: type[ModelT], entity_id: UUID | str) -> ModelT | None:
        ...

    async def select_joined(
        self,
        model: type[ModelT],
        joins: Mapping[str, type[SQLModel]],
        *criteria: Criterion,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[tuple[Any, ...]]:
        ...

    async def insert(self, row: ModelT) -> ModelT:
        ...

    async def update(self, model: type[ModelT], entity_id: UUID | str, patch: Mapping[str, Any]) -> ModelT | None:
        ...

    async def delete(self, model: type[ModelT], entity_id: UUID | str) -> bool:
        ...


class SQLModelEntityStore:
    """EntityStore sobre uma ``Session`` SQLModel síncrona.

    Cada operação roda no threadpool para não bloquear o event loop; a sessão
    é usada de forma sequencial por requisição.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # Leitura -------------------------------------------------------------
    async def select(
        self,
        model: type[ModelT],
        *criteria: Criterion,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[ModelT]:
        return await run_in_threadpool(self._select, model, criteria, order_by, descending, limit)

    async def select_one(self, model: type[ModelT], *criteria: Criterion) -> ModelT | None:
        rows = await self.select(model, *criteria, limit=1)
        return rows[0] if rows else None

    async def get(self, model: type[ModelT], entity_id: UUID | str) -> ModelT | None:
        key = as_uuid(entity_id)
        if key is None:
            return None
        return await run_in_threadpool(self._get, model, key)

    async def select_joined(
        self,
        model: type[ModelT],
        joins: Mapping[str, type[SQLModel]],
        *criteria: Criterion,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[tuple[Any, ...]]:
        return await run_in_threadpool(self._select_joined, model, joins, criteria, order_by, descending)

    # Escrita -------------------------------------------------------------
    async def insert(self, row: ModelT) -> ModelT:
        return await run_in_threadpool(self._insert, row)

    async def update(self, model: type[ModelT], entity_id: UUID | str, patch: Mapping[str, Any]) -> ModelT | None:
        key = as_uuid(entity_id)
        if key is None:
            return None
        return await run_in_threadpool(self._update, model, key, dict(patch))

    async def delete(self, model: type[ModelT], entity_id: UUID | str) -> bool:
        key = as_uuid(entity_id)
        if key is None:
            return False
        return await run_in_threadpool(self._delete, model, key)

    # Implementação síncrona ------------------------------------------------
    @staticmethod
    def _apply_criteria(statement, model: type[SQLModel], criteria: Sequence[Criterion]):
        for criterion in criteria:
            column = getattr(model, criterion.field)
            if criterion.op == "eq":
                statement = statement.where(column == criterion.value)
            elif criterion.op == "ne":
                statement = statement.where(column != criterion.value)
            elif criterion.op == "contains":
                pattern = f"%{str(criterion.value).lower()}%"
                statement = statement.where(func.lower(column).like(pattern))
            else:
                raise ValueError(f"Operador de filtro desconhecido: {criterion.op}")
        return statement

    @staticmethod
    def _apply_order(statement, model: type[SQLModel], order_by: str | None, descending: bool):
        if not order_by:
            return statement
        column = getattr(model, order_by)
        return statement.order_by(column.desc() if descending else column.asc())

    def _select(self, model, criteria, order_by, descending, limit):
        statement = self._apply_criteria(select(model), model, criteria)
        statement = self._apply_order(statement, model, order_by, descending)
        if limit is not None:
            statement = statement.limit(limit)
        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def _get(self, model, key: UUID):
        try:
            return self.session.get(model, key)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def _select_joined(self, model, joins, criteria, order_by, descending):
        related = list(joins.values())
        statement = select(model, *related)
        for foreign_key, target in joins.items():
            statement = statement.outerjoin(target, getattr(model, foreign_key) == target.id)
        statement = self._apply_criteria(statement, model, criteria)
        statement = self._apply_order(statement, model, order_by, descending)
        try:
            return [tuple(row) for row in self.session.exec(statement).all()]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def _insert(self, row):
        self.session.add(row)
        self._commit()
        self.session.refresh(row)
        return row

    def _update(self, model, key: UUID, patch: dict[str, Any]):
        row = self._get(model, key)
        if row is None:
            return None
        for field, value in patch.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        self.session.add(row)
        self._commit()
        self.session.refresh(row)
        return row

    def _delete(self, model, key: UUID) -> bool:
        row = self._get(model, key)
        if row is None:
            return False
        self.session.delete(row)
        self._commit()
        return True

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if _is_unique_violation(exc):
                raise UniqueViolation(str(exc.orig)) from exc
            raise StoreError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError(str(exc)) from exc


def _is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "pgcode", None) == _UNIQUE_VIOLATION_PGCODE:
        return True
    return "unique" in str(exc.orig).lower()
