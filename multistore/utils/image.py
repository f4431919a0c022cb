import logging
import uuid
from pathlib import Path
from fastapi import UploadFile, HTTPException
from PIL import Image, UnidentifiedImageError
from multistore.core.config import settings

OPTIMIZABLE = {"jpg", "jpeg", "png", "webp"}

def resolve_key(key: str) -> Path:
    """Map a storage key to a path inside UPLOAD_DIR, refusing anything that escapes it"""
    root = settings.UPLOAD_DIR.resolve()
    path = (root / key).resolve()
    if root not in path.parents:
        raise HTTPException(status_code=400, detail="Invalid file key")
    return path

def save_uploaded_file(file: UploadFile, folder: str = "uploads") -> dict:
    """Validate, store and optimize an upload. Returns its storage key and public URL"""
    if file.content_type not in settings.ALLOWED_UPLOAD_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type. Only images and documents are allowed.")

    content = file.file.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="File too large")

    file_extension = file.filename.rsplit('.', 1)[-1].lower() if file.filename and '.' in file.filename else 'bin'
    key = f"{folder.strip('/')}/{uuid.uuid4()}.{file_extension}"
    file_path = resolve_key(key)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)

    if file_extension in OPTIMIZABLE:
        optimize_image(file_path, image_type=folder)

    return {
        "key": key,
        "url": f"/uploads/{key}",
        "filename": file.filename,
        "content_type": file.content_type,
        "size": len(content),
    }

def optimize_image(file_path: Path, max_size: tuple = (1200, 1200), quality: int = 85, image_type: str = "general"):
    """Shrink oversized images in place; product and category images are cropped square"""
    try:
        with Image.open(file_path) as img:
            if img.mode in ('RGBA', 'LA', 'P') and file_path.suffix.lower() in ('.jpg', '.jpeg'):
                img = img.convert('RGB')

            if image_type in ('products', 'categories'):
                width, height = img.size
                size = min(width, height)
                left = (width - size) // 2
                top = (height - size) // 2
                img = img.crop((left, top, left + size, top + size))
                target = 800 if image_type == 'products' else 500
                if size > target:
                    img = img.resize((target, target), Image.Resampling.LANCZOS)
            else:
                img.thumbnail(max_size, Image.Resampling.LANCZOS)

            img.save(file_path, optimize=True, quality=quality)
    except (OSError, UnidentifiedImageError) as e:
        # If optimization fails, keep original file
        logging.warning(f"Failed to optimize image {file_path}: {str(e)}")

def delete_uploaded_file(key: str) -> bool:
    """Delete uploaded file"""
    file_path = resolve_key(key)
    if not file_path.is_file():
        return False
    try:
        file_path.unlink()
        return True
    except OSError as e:
        logging.warning(f"Failed to delete file {key}: {str(e)}")
        return False
