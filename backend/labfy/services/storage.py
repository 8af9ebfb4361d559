from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote, unquote

import boto3
from botocore.client import Config as BotoConfig
from fastapi.concurrency import run_in_threadpool

from labfy.core.config import settings


def _determine_base_storage() -> Path:
    raw = os.getenv("LABFY_STORAGE") or settings.labfy_storage or "storage"
    try:
        return Path(raw).expanduser().resolve()
    except OSError:
        return Path(raw)


def name_from_locator(locator: str) -> str:
    """Extrai o nome do objeto (último segmento) de um locator público."""
    return unquote(locator.rstrip("/").split("/")[-1])


class BlobStore(Protocol):
    async def put(self, bucket: str, name: str, data: bytes, content_type: str = "application/pdf") -> str:
        ...

    async def delete(self, bucket: str, name: str) -> None:
        ...


@dataclass
class LocalBlobStore:
    base_dir: Path
    public_base_url: str = ""

    def __post_init__(self) -> None:
        try:
            self.base_dir = Path(self.base_dir).resolve()
        except OSError:
            self.base_dir = Path(self.base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    async def put(self, bucket: str, name: str, data: bytes, content_type: str = "application/pdf") -> str:  # noqa: ARG002
        await run_in_threadpool(self._write, bucket, name, data)
        return self.public_url(bucket, name)

    async def delete(self, bucket: str, name: str) -> None:
        await run_in_threadpool(self._remove, bucket, name)

    def public_url(self, bucket: str, name: str) -> str:
        base = self.public_base_url.rstrip("/")
        return f"{base}/{bucket}/{quote(name)}"

    def path_for(self, bucket: str, name: str) -> Path:
        return self.base_dir / bucket / Path(name).name

    def _write(self, bucket: str, name: str, data: bytes) -> None:
        target = self.path_for(bucket, name)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def _remove(self, bucket: str, name: str) -> None:
        target = self.path_for(bucket, name)
        if not target.exists():
            raise FileNotFoundError(f"Arquivo {bucket}/{name!r} não encontrado no armazenamento configurado.")
        target.unlink()


@dataclass
class S3BlobStore:
    client: Any
    public_base_url: str

    async def put(self, bucket: str, name: str, data: bytes, content_type: str = "application/pdf") -> str:
        await run_in_threadpool(
            self.client.put_object,
            Bucket=bucket,
            Key=name,
            Body=data,
            ContentType=content_type,
        )
        return f"{self.public_base_url.rstrip('/')}/{bucket}/{quote(name)}"

    async def delete(self, bucket: str, name: str) -> None:
        await run_in_threadpool(self.client.delete_object, Bucket=bucket, Key=name)


@lru_cache
def get_blob_store() -> BlobStore:
    """Backend de armazenamento compartilhado pelo processo (criado uma vez)."""
    if settings.s3_enabled():
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            config=BotoConfig(signature_version="s3v4"),
            region_name=settings.s3_region,
        )
        public_base = settings.s3_public_url or settings.s3_endpoint_url
        return S3BlobStore(client=client, public_base_url=public_base)

    return LocalBlobStore(
        base_dir=_determine_base_storage(),
        public_base_url=settings.resolved_public_storage_url(),
    )
