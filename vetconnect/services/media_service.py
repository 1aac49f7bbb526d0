import os
import uuid
from pathlib import Path

import boto3
import cloudinary
import cloudinary.uploader
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from vetconnect.core.config import settings
from vetconnect.utils.errors import UploadRejectedError

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/webp", "image/gif"}


def _get_s3_client():
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION or "ap-southeast-1",
    )


def _configure_cloudinary() -> None:
    if not (settings.CLOUDINARY_CLOUD_NAME and settings.CLOUDINARY_API_KEY and settings.CLOUDINARY_API_SECRET):
        raise RuntimeError("CLOUDINARY_* settings are missing")
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


async def _read_checked(file: UploadFile) -> bytes:
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise UploadRejectedError(f"Unsupported image type: {file.content_type}")
    contents = await file.read()
    if len(contents) > settings.MAX_UPLOAD_MB * 1024 * 1024:
        raise UploadRejectedError(f"Each photo must be less than {settings.MAX_UPLOAD_MB}MB")
    if not contents:
        raise UploadRejectedError("Empty file")
    return contents


async def upload_clinic_image(file: UploadFile, folder: str = "clinics") -> str:
    """Store an image and return the URL it will be served from."""
    contents = await _read_checked(file)
    ext = os.path.splitext(file.filename or "")[1].lower()
    await file.close()

    if settings.STORAGE_BACKEND == "cloudinary":
        return await run_in_threadpool(_upload_cloudinary, contents, folder)
    if settings.STORAGE_BACKEND == "s3":
        return await run_in_threadpool(_upload_s3, contents, folder, ext, file.content_type)
    return _upload_local(contents, folder, ext)


def _upload_local(contents: bytes, folder: str, ext: str) -> str:
    base_dir = Path("uploads") / folder
    base_dir.mkdir(parents=True, exist_ok=True)

    name = f"{uuid.uuid4().hex}{ext}"
    (base_dir / name).write_bytes(contents)

    # Served by the static mount in main.py
    return f"/static/{folder}/{name}"


def _upload_s3(contents: bytes, folder: str, ext: str, content_type: str) -> str:
    s3 = _get_s3_client()
    bucket = settings.AWS_S3_BUCKET
    key = f"{folder}/{uuid.uuid4().hex}{ext}"
    s3.put_object(Bucket=bucket, Key=key, Body=contents, ContentType=content_type)

    if settings.AWS_PUBLIC_BASE_URL:
        return f"{settings.AWS_PUBLIC_BASE_URL}/{key}"
    return f"https://{bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"


def _upload_cloudinary(contents: bytes, folder: str) -> str:
    _configure_cloudinary()
    res = cloudinary.uploader.upload(
        contents,
        folder=f"{settings.CLOUDINARY_FOLDER}/{folder}",
        resource_type="image",
        overwrite=True,
        unique_filename=True,
        use_filename=False,
        tags=["vetconnect"],
        type="upload",
        transformation=[{"quality": "auto:good"}, {"fetch_format": "auto"}],
    )
    return res["secure_url"]
