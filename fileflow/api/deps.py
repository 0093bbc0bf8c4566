"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for routes including:
- The component factory stored on the application
- The template registry and document service
- Upload storage
"""

import logging
import uuid
from pathlib import Path

from fastapi import Depends, HTTPException, Request, UploadFile, status

from fileflow.core.config import Settings
from fileflow.core.factory import ComponentFactory
from fileflow.services.documents import DocumentService
from fileflow.services.registry import TemplateRegistry

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Dependency for the settings the application was created with."""
    return request.app.state.settings


def get_factory(request: Request) -> ComponentFactory:
    """Dependency for the application's component factory."""
    return request.app.state.factory


def get_registry(factory: ComponentFactory = Depends(get_factory)) -> TemplateRegistry:
    """Dependency for the template registry."""
    return factory.get_registry()


def get_document_service(factory: ComponentFactory = Depends(get_factory)) -> DocumentService:
    """Dependency for the document service."""
    return factory.get_document_service()


async def save_upload(file: UploadFile, directory: Path, allowed: set[str]) -> Path:
    """Store an uploaded file under a unique name.

    Args:
        file: The uploaded file.
        directory: Destination directory.
        allowed: Accepted lower-case extensions, e.g. {".docx", ".txt"}.

    Returns:
        Path of the stored file; its name ends with the original file name.

    Raises:
        HTTPException: 415 if the extension is not accepted, 400 if empty.
    """
    original = Path(file.filename or "").name
    suffix = Path(original).suffix.lower()
    if suffix not in allowed:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Only {', '.join(sorted(allowed))} files are supported",
        )

    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")

    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{uuid.uuid4().hex}_{original}"
    path.write_bytes(content)
    logger.info(f"Saved upload {original} as {path} ({len(content)} bytes)")
    return path
