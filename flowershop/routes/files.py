import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File as FileParam, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import Response
from sqlmodel import Session, select

from flowershop.database import get_session
from flowershop.dependencies.auth import require_admin
from flowershop.models.file import File
from flowershop.services.session_service import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter()

PARENT_TYPES = {"product", "review"}


def _metadata(f: File) -> dict:
    return {
        "id": f.id,
        "filename": f.filename,
        "mimetype": f.mimetype,
        "parent_id": f.parent_id,
        "parent_type": f.parent_type,
        "created_at": f.created_at,
        "updated_at": f.updated_at,
    }


async def read_upload(file: UploadFile, max_bytes: int) -> bytes:
    """Read at most max_bytes from the upload, 413 past that."""
    if file.size is not None and file.size > max_bytes:
        raise HTTPException(413, "File is too large")

    contents = await file.read(max_bytes + 1)
    if len(contents) > max_bytes:
        raise HTTPException(413, "File is too large")
    return contents


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: Request,
    file: UploadFile = FileParam(...),
    parent_id: Optional[int] = Form(None),
    parent_type: Optional[str] = Form(None),
    session: Session = Depends(get_session),
    admin: SessionContext = Depends(require_admin)
):
    """Store an uploaded file in the database, optionally attached to a product or review"""
    if parent_type is not None and parent_type not in PARENT_TYPES:
        raise HTTPException(400, f"parent_type must be one of: {', '.join(sorted(PARENT_TYPES))}")

    max_bytes = request.app.state.settings.max_upload_size_mb * 1024 * 1024
    contents = await read_upload(file, max_bytes)
    if not contents:
        raise HTTPException(400, "File is empty")

    stored = File(
        filename=file.filename or "upload",
        mimetype=file.content_type or "application/octet-stream",
        data=contents,
        parent_id=parent_id,
        parent_type=parent_type,
    )
    session.add(stored)
    session.commit()
    session.refresh(stored)

    logger.info("Admin %s uploaded file %s (%s bytes)", admin.user_id, stored.id, len(contents))
    return {**_metadata(stored), "size": len(contents)}


@router.get("")
def list_files(session: Session = Depends(get_session)):
    files = session.exec(select(File).order_by(File.created_at.desc())).all()
    return [_metadata(f) for f in files]


@router.get("/parent/{parent_id}")
def files_by_parent(
    parent_id: int,
    parent_type: Optional[str] = None,
    session: Session = Depends(get_session)
):
    query = select(File).where(File.parent_id == parent_id)
    if parent_type:
        query = query.where(File.parent_type == parent_type)
    return [_metadata(f) for f in session.exec(query.order_by(File.created_at)).all()]


@router.get("/{file_id}")
def download_file(file_id: int, session: Session = Depends(get_session)):
    stored = session.get(File, file_id)
    if not stored:
        raise HTTPException(404, "File not found")

    return Response(
        content=stored.data,
        media_type=stored.mimetype,
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(stored.filename)}"},
    )


@router.delete("/{file_id}")
def delete_file(
    file_id: int,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    stored = session.get(File, file_id)
    if not stored:
        raise HTTPException(404, "File not found")

    metadata = _metadata(stored)
    session.delete(stored)
    session.commit()
    return {"message": "File deleted", "file": metadata}
