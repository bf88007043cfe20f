import logging
import secrets
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from storefront.api.deps import get_admin_user
from storefront.core.config import Settings, get_settings
from storefront.db.supabase import get_admin_client

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_admin_user)])

MAX_IMAGE_BYTES = 5 * 1024 * 1024


def storage_path(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1] if "." in filename else "bin"
    return f"products/{int(time.time() * 1000)}-{secrets.token_hex(6)}.{ext}"


@router.post("")
async def upload_images(
    files: List[UploadFile] = File(default=[]),
    db=Depends(get_admin_client),
    settings: Settings = Depends(get_settings),
):
    if not files:
        raise HTTPException(status_code=400, detail="No files provided")

    bucket = db.storage.from_(settings.STORAGE_BUCKET)
    urls, errors = [], []
    for upload in files:
        name = upload.filename or "file"
        if not (upload.content_type or "").startswith("image/"):
            errors.append(f"{name}: Only image files are allowed")
            continue
        if upload.size is not None and upload.size > MAX_IMAGE_BYTES:
            errors.append(f"{name}: File size must be less than 5MB")
            continue
        # size is unknown for some streamed parts
        content = await upload.read()
        if len(content) > MAX_IMAGE_BYTES:
            errors.append(f"{name}: File size must be less than 5MB")
            continue
        path = storage_path(name)
        try:
            bucket.upload(path, content, {"content-type": upload.content_type, "upsert": "false"})
        except Exception as e:
            logger.error(f"Upload of {name} failed: {e}")
            errors.append(f"{name}: Upload failed - {e}")
            continue
        urls.append(bucket.get_public_url(path))

    if not urls:
        return JSONResponse(status_code=400, content={"error": "No files uploaded successfully", "details": errors})
    return {
        "urls": urls,
        "errors": errors or None,
        "message": f"{len(urls)} file(s) uploaded successfully",
    }


@router.delete("")
def delete_image(url: Optional[str] = None, db=Depends(get_admin_client), settings: Settings = Depends(get_settings)):
    if not url:
        raise HTTPException(status_code=400, detail="Image URL is required")
    parts = url.split(f"/{settings.STORAGE_BUCKET}/")
    if len(parts) != 2:
        raise HTTPException(status_code=400, detail="Invalid image URL format")
    try:
        db.storage.from_(settings.STORAGE_BUCKET).remove([parts[1]])
    except Exception as e:
        logger.error(f"Delete of {parts[1]} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete image")
    return {"message": "Image deleted successfully"}
