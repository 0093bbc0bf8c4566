"""Template management API routes.

Handles template upload, variable listing, default values, statistics,
preview and document generation.
"""

import logging
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from fileflow.api.deps import get_app_settings, get_document_service, get_registry, save_upload
from fileflow.api.schemas import (
    DocumentResponse,
    GenerateRequest,
    MessageResponse,
    SaveValuesRequest,
    StrategyFailureResponse,
    TemplateListResponse,
    TemplateResponse,
)
from fileflow.core.config import Settings
from fileflow.services.documents import DocumentService
from fileflow.services.registry import TemplateRegistry
from fileflow.strategies.template_engine.models import TemplatePreview, TemplateStats

logger = logging.getLogger(__name__)

TEMPLATE_EXTENSIONS = {".docx", ".txt", ".md"}

router = APIRouter(prefix="/templates", tags=["templates"])


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def upload_template(
    file: UploadFile,
    registry: TemplateRegistry = Depends(get_registry),
    settings: Settings = Depends(get_app_settings),
) -> TemplateResponse:
    """Upload a template document and extract its variables.

    Args:
        file: A Word (.docx) or plain-text (.txt, .md) template.
        registry: Template registry.
        settings: Application settings.

    Returns:
        The registered template with its variable names.

    Raises:
        HTTPException: If the file type is unsupported or unreadable.
    """
    path = await save_upload(file, Path(settings.upload_dir) / "templates", TEMPLATE_EXTENSIONS)

    try:
        template = await registry.register(path, name=Path(file.filename or path.name).stem)
    except ValueError as e:
        path.unlink(missing_ok=True)
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(e)) from e
    except RuntimeError as e:
        path.unlink(missing_ok=True)
        logger.error(f"Failed to read template {file.filename}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return TemplateResponse.from_template(template)


@router.get("", response_model=TemplateListResponse)
async def list_templates(registry: TemplateRegistry = Depends(get_registry)) -> TemplateListResponse:
    """List registered templates, oldest first."""
    templates = [TemplateResponse.from_template(t) for t in registry.list()]
    return TemplateListResponse(templates=templates, total=len(templates))


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: str,
    registry: TemplateRegistry = Depends(get_registry),
) -> TemplateResponse:
    """Get a template with its saved default values."""
    return TemplateResponse.from_template(registry.get(template_id))


@router.post("/{template_id}/values", response_model=TemplateResponse)
async def save_values(
    template_id: str,
    request: SaveValuesRequest,
    registry: TemplateRegistry = Depends(get_registry),
) -> TemplateResponse:
    """Merge default values into a template."""
    template = await registry.set_default_values(template_id, request.values)
    return TemplateResponse.from_template(template)


@router.delete("/{template_id}", response_model=MessageResponse)
async def delete_template(
    template_id: str,
    registry: TemplateRegistry = Depends(get_registry),
) -> MessageResponse:
    """Delete a template and its stored document."""
    await registry.delete(template_id)
    return MessageResponse(message=f"Template {template_id} deleted")


@router.get("/{template_id}/stats", response_model=TemplateStats)
async def template_stats(
    template_id: str,
    registry: TemplateRegistry = Depends(get_registry),
) -> TemplateStats:
    """Word, character, line and variable counts of a template."""
    return registry.stats(template_id)


@router.get("/{template_id}/preview", response_model=TemplatePreview)
async def template_preview(
    template_id: str,
    registry: TemplateRegistry = Depends(get_registry),
) -> TemplatePreview:
    """Leading excerpt and full text of a template."""
    return registry.preview(template_id)


@router.post("/{template_id}/generate", response_model=DocumentResponse)
async def generate_document(
    template_id: str,
    request: GenerateRequest,
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Fill a template and produce a downloadable document.

    Args:
        template_id: The template to fill.
        request: Values, output format and fidelity.
        service: Document service.

    Returns:
        The generated file's name and download URL.
    """
    logger.info(f"Generating {request.format} document from template {template_id}")
    result = await service.generate_document(
        template_id, request.values, fmt=request.format, fidelity=request.fidelity
    )
    file_name = result.output_path.name
    return DocumentResponse(
        file_name=file_name,
        download_url=f"/downloads/{quote(file_name)}",
        strategy=result.strategy,
        failures=[StrategyFailureResponse(strategy=f.strategy, reason=f.reason) for f in result.failures],
    )
