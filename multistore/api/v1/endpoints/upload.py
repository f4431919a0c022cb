from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from fastapi.responses import FileResponse
from typing import List

from multistore.api.v1.endpoints.auth import get_current_user
from multistore.core.security import DOWNLOAD_SCOPE, create_scoped_token, decode_scoped_token
from multistore.utils.image import save_uploaded_file, delete_uploaded_file, resolve_key

router = APIRouter()

MAX_FILES = 10

@router.post("/upload/single")
def upload_single(
    file: UploadFile = File(...),
    folder: str = Form("uploads"),
    user: dict = Depends(get_current_user)
):
    return {"success": True, "file": save_uploaded_file(file, folder)}

@router.post("/upload/multiple")
def upload_multiple(
    files: List[UploadFile] = File(...),
    folder: str = Form("uploads"),
    user: dict = Depends(get_current_user)
):
    if not files:
        raise HTTPException(status_code=400, detail="No files provided")
    if len(files) > MAX_FILES:
        raise HTTPException(status_code=400, detail=f"Maximum {MAX_FILES} files allowed")

    return {"success": True, "files": [save_uploaded_file(f, folder) for f in files]}

@router.get("/upload/signed-url/{key:path}")
def get_signed_url(key: str, expires_in: int = 3600, user: dict = Depends(get_current_user)):
    if not resolve_key(key).is_file():
        raise HTTPException(status_code=404, detail="File not found")

    expires_in = min(max(expires_in, 60), 7 * 24 * 3600)
    token = create_scoped_token(DOWNLOAD_SCOPE, key, seconds=expires_in)
    return {"success": True, "signed_url": f"/api/upload/signed/{token}", "expires_in": expires_in}

@router.get("/upload/signed/{token}")
def download_signed(token: str):
    key = decode_scoped_token(token, DOWNLOAD_SCOPE)
    if not key:
        raise HTTPException(status_code=403, detail="Invalid or expired link")

    path = resolve_key(key)
    if not path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path)

@router.delete("/upload/{key:path}")
def delete_file(key: str, user: dict = Depends(get_current_user)):
    if not delete_uploaded_file(key):
        raise HTTPException(status_code=404, detail="File not found")
    return {"success": True, "message": "File deleted successfully"}
