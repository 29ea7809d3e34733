"""Object storage for listing images and company logos."""

import time
import uuid
from typing import Optional
from urllib.parse import urlsplit
from pydantic import BaseModel, Field

from src.services.supabase_client import SupabaseGateway
from src.utils.errors import StorageError, SupabaseError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

IMAGE_PREFIX = "property-images"
LOGO_PREFIX = "logos"


class ImageFile(BaseModel):
    """An uploaded file as received by the API layer."""
    filename: str = Field(..., description="Original client file name")
    content: bytes = Field(..., description="Raw file bytes")
    content_type: Optional[str] = Field(None, description="MIME type if the client sent one")

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return "bin"
        return self.filename.rsplit(".", 1)[-1].lower() or "bin"


def _object_name(prefix: str, folder: str, image: ImageFile) -> str:
    stamp = int(time.time() * 1000)
    return f"{prefix}/{folder}/{stamp}-{uuid.uuid4().hex[:6]}.{image.extension}"


def _upload(gateway: SupabaseGateway, path: str, image: ImageFile) -> str:
    bucket = gateway.images_bucket()
    file_options = {
        "cache-control": str(gateway.config.image_cache_control),
        "upsert": "false",
    }
    if image.content_type:
        file_options["content-type"] = image.content_type
    bucket.upload(path, image.content, file_options)
    return bucket.get_public_url(path)


async def upload_property_images(
    gateway: SupabaseGateway,
    files: list[ImageFile],
    property_id: str,
) -> list[str]:
    """
    Upload listing images and return their public URLs in input order.

    A file that fails to upload is logged and skipped; the rest still go up.
    """
    uploaded_urls: list[str] = []

    for image in files:
        path = _object_name(IMAGE_PREFIX, property_id, image)
        try:
            uploaded_urls.append(_upload(gateway, path, image))
        except Exception as e:
            logger.warning(
                "Error uploading property image, skipping",
                property_id=property_id,
                file_name=image.filename,
                error=str(e)
            )
            continue

    logger.info(
        "Uploaded property images",
        property_id=property_id,
        requested=len(files),
        uploaded=len(uploaded_urls)
    )
    return uploaded_urls


def storage_path_from_url(url: str, bucket: str) -> Optional[str]:
    """Object path inside the bucket for one of its public URLs."""
    path = urlsplit(url).path
    marker = f"/{bucket}/"
    index = path.find(marker)
    if index < 0:
        return None
    object_path = path[index + len(marker):]
    return object_path or None


async def delete_property_images(gateway: SupabaseGateway, urls: list[str]) -> int:
    """Remove stored images by public URL; URLs from other buckets are ignored."""
    bucket_name = gateway.config.property_images_bucket
    paths = [p for p in (storage_path_from_url(url, bucket_name) for url in urls) if p]
    if not paths:
        return 0

    try:
        gateway.images_bucket().remove(paths)
    except Exception as e:
        raise StorageError(f"Failed to delete property images: {e}") from e

    logger.info("Deleted property images", count=len(paths))
    return len(paths)


async def upload_company_logo(gateway: SupabaseGateway, image: ImageFile, agent_id: str) -> str:
    """Upload a logo and point agents.logo_url at it."""
    path = _object_name(LOGO_PREFIX, agent_id, image)
    try:
        url = _upload(gateway, path, image)
    except Exception as e:
        raise StorageError(f"Failed to upload company logo: {e}") from e

    try:
        gateway.table("agents").update({"logo_url": url}).eq("id", agent_id).execute()
    except Exception as e:
        raise SupabaseError(f"Logo uploaded but agent update failed: {e}") from e

    logger.info("Company logo uploaded", agent_id=agent_id)
    return url
