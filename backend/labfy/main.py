from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from labfy.api.routes import clientes, contratos, health, projetos, webhooks
from labfy.core.config import settings
from labfy.core.logging_setup import logger
from labfy.db.session import init_db
from labfy.services.storage import LocalBlobStore, get_blob_store


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    init_db()
    yield


def _normalize_origin(value: str | None) -> str | None:
    if not value:
        return None
    cleaned = value.strip().rstrip("/")
    return cleaned or None


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.project_name,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # ===============================================================
    # CORS
    # ===============================================================
    origins: list[str] = []
    for item in settings.allowed_origins:
        normalized = _normalize_origin(item)
        if normalized and normalized not in origins:
            origins.append(normalized)

    logger.info(f"CORS configurado com origins: {origins}")

    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ===============================================================
    # ROTAS
    # ===============================================================
    application.include_router(health.router, prefix="/health")
    application.include_router(clientes.router, prefix=settings.api_prefix)
    application.include_router(projetos.router, prefix=settings.api_prefix)
    application.include_router(contratos.router, prefix=settings.api_prefix)
    application.include_router(webhooks.router, prefix=settings.api_prefix)

    # ===============================================================
    # ARQUIVOS LOCAIS (sem S3 configurado)
    # ===============================================================
    blob_store = get_blob_store()
    if isinstance(blob_store, LocalBlobStore):
        application.mount("/storage", StaticFiles(directory=str(blob_store.base_dir)), name="storage")

    @application.get("/")
    def root():
        return {"service": settings.project_name}

    logger.info("Labfy Contratos API inicializada")
    return application


app = create_app()
