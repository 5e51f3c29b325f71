from fastapi import APIRouter, Depends, UploadFile, File, Form, HTTPException
from ..models import AdminUser
from ..schemas import MediaOut, OperationResult
from ..security.rbac import require_moderator
from ..services import storage

router = APIRouter(prefix="/media", tags=["media"])

@router.post("", response_model=list[MediaOut])
def upload_media(
    files: list[UploadFile] = File(...),
    folder: str = Form("uploads"),
    _: AdminUser = Depends(require_moderator),
):
    payload = [(f.filename or "upload", f.file.read()) for f in files]
    try:
        # size limits are checked for every file before anything is stored
        for name, data in payload:
            storage.validate_file_size(name, len(data))
        return storage.upload_files(payload, folder)
    except storage.StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.delete("", response_model=OperationResult)
def delete_media(url: str, _: AdminUser = Depends(require_moderator)):
    try:
        storage.delete_file(url)
    except storage.StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return OperationResult(success=True)
