"""
Subida de documentos de postulación.

El archivo se valida antes de tocar Storage (tamaño y tipo), se sube
al bucket de documentos y después se registra en application_documents.
"""

import re
import time
from typing import Optional

import structlog
from supabase import StorageException

from habitar.config import DOCUMENT_TYPES, get_settings
from habitar.database import DocumentRepository, SupabaseClient
from habitar.errors import NotFoundError, PersistenceError, ValidationError
from habitar.models import ApplicationDocument

logger = structlog.get_logger()

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_filename(filename: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


def generate_user_file_path(user_id: str, filename: str, now_ms: Optional[int] = None) -> str:
    """Ruta {user_id}/{epoch_ms}_{nombre_saneado}."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{user_id}/{timestamp}_{sanitize_filename(filename)}"


class DocumentService:
    """Storage + registro de documentos de un inquilino."""

    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        repo: Optional[DocumentRepository] = None,
    ):
        settings = get_settings()
        self.repo = repo or DocumentRepository(client)
        self.bucket_name = settings.documents_bucket
        self.max_upload_bytes = settings.max_upload_bytes

    @property
    def bucket(self):
        return self.repo.client.bucket(self.bucket_name)

    def validate(self, document_type: str, filename: str, size: int) -> None:
        if not document_type:
            raise ValidationError("Elegí el tipo de documento", field="document_type")
        if document_type not in DOCUMENT_TYPES:
            raise ValidationError(
                f"Tipo de documento desconocido: {document_type}", field="document_type"
            )
        if not filename:
            raise ValidationError("Falta el archivo", field="file")
        self.check_size(size)

    def check_size(self, size: int) -> None:
        if size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise ValidationError(
                f"El archivo supera el máximo de {limit_mb} MB", field="file"
            )

    def upload(
        self,
        user_id: str,
        document_type: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> ApplicationDocument:
        """
        Sube un documento y lo registra como pendiente de verificación.

        Raises:
            ValidationError: Si el archivo no pasa la validación
            PersistenceError: Si falla Storage o el insert
        """
        self.validate(document_type, filename, len(content))

        storage_path = generate_user_file_path(user_id, filename)
        file_options = {"cache-control": "3600", "upsert": "false"}
        if content_type:
            file_options["content-type"] = content_type

        try:
            self.bucket.upload(storage_path, content, file_options=file_options)
        except StorageException as e:
            logger.error("Error subiendo archivo", path=storage_path, error=str(e))
            raise PersistenceError("upload", self.bucket_name, str(e)) from e

        document = ApplicationDocument(
            tenant_id=user_id,
            document_type=document_type,
            file_name=filename,
            file_url=f"{self.bucket_name}/{storage_path}",
            file_size=len(content),
            storage_path=storage_path,
            bucket_id=self.bucket_name,
        )
        row = self.repo.create(document.to_db_dict())
        logger.info("Documento subido", tenant_id=user_id, path=storage_path)
        return ApplicationDocument.model_validate({**document.model_dump(), **row})

    def list_documents(self, tenant_id: str) -> list[ApplicationDocument]:
        return [ApplicationDocument.model_validate(r) for r in self.repo.get_by_tenant(tenant_id)]

    def public_url(self, storage_path: str) -> str:
        return self.bucket.get_public_url(storage_path)

    def delete(self, tenant_id: str, document_id: str) -> None:
        """Borra el objeto de Storage y su registro."""
        row = self.repo.get_by_id(document_id)
        if not row or row.get("tenant_id") != tenant_id:
            raise NotFoundError("Documento", document_id)

        if row.get("storage_path"):
            try:
                self.bucket.remove([row["storage_path"]])
            except StorageException as e:
                raise PersistenceError("remove", self.bucket_name, str(e)) from e
        self.repo.delete(document_id)
        logger.info("Documento eliminado", tenant_id=tenant_id, document_id=document_id)
