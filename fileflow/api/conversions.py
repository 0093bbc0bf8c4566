"""Format conversion and download API routes."""

import logging
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse

from fileflow.api.deps import get_app_settings, get_document_service, save_upload
from fileflow.api.schemas import DocumentResponse, Fidelity, OutputFormat, StrategyFailureResponse
from fileflow.core.config import Settings
from fileflow.services.documents import DocumentService

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = {".docx", ".pdf", ".txt", ".md"}

MEDIA_TYPES = {
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".pdf": "application/pdf",
    ".txt": "text/plain; charset=utf-8",
}

router = APIRouter(tags=["conversions"])


@router.post("/conversions", response_model=DocumentResponse)
async def convert_document(
    file: UploadFile,
    target_format: OutputFormat = Form(...),
    fidelity: Fidelity | None = Form(default=None),
    markdown_headings: bool = Form(default=False),
    service: DocumentService = Depends(get_document_service),
    settings: Settings = Depends(get_app_settings),
) -> DocumentResponse:
    """Convert an uploaded document to another format.

    Args:
        file: A .docx, .pdf, .txt or .md document.
        target_format: "docx", "pdf" or "txt".
        fidelity: "high" tries layout-preserving converters first.
        markdown_headings: Treat leading '#' markers in text as headings.
        service: Document service.
        settings: Application settings.

    Returns:
        The converted file's name, download URL and the winning strategy.

    Raises:
        HTTPException: If the file type or format pair is unsupported.
    """
    path = await save_upload(file, Path(settings.upload_dir) / "conversions", SOURCE_EXTENSIONS)

    try:
        result = await service.convert_file(
            path, target_format, fidelity=fidelity, markdown_headings=markdown_headings
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    finally:
        path.unlink(missing_ok=True)

    file_name = result.output_path.name
    logger.info(f"Converted {file.filename} to {file_name} via {result.strategy}")
    return DocumentResponse(
        file_name=file_name,
        download_url=f"/downloads/{quote(file_name)}",
        strategy=result.strategy,
        failures=[StrategyFailureResponse(strategy=f.strategy, reason=f.reason) for f in result.failures],
    )


@router.get("/downloads/{file_name}")
async def download_file(
    file_name: str,
    settings: Settings = Depends(get_app_settings),
) -> FileResponse:
    """Download a generated or converted document."""
    if Path(file_name).name != file_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file name")

    path = Path(settings.output_dir) / file_name
    if not path.is_file():
        logger.warning(f"Download requested for missing file: {file_name}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    return FileResponse(
        path,
        media_type=MEDIA_TYPES.get(path.suffix.lower(), "application/octet-stream"),
        filename=file_name,
    )
