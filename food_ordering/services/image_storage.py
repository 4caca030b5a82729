"""
Remote image storage on S3
"""
import asyncio
import logging
import uuid
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

import boto3
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from food_ordering.core.config import settings

logger = logging.getLogger(__name__)


class ImageStorage:
    """Uploads and destroys images on the remote host.

    ``upload`` returns ``{"public_id", "url"}``; the public id is the
    object key and is what ``destroy`` expects back.
    """

    def __init__(self, bucket_name: Optional[str] = None, folder: Optional[str] = None, client=None):
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.folder = folder or settings.S3_IMAGE_FOLDER
        self.s3_client = client or boto3.client(
            "s3",
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            region_name=settings.AWS_REGION,
        )

    def url_for(self, public_id: str) -> str:
        return f"https://{self.bucket_name}.s3.amazonaws.com/{public_id}"

    def upload(self, file: UploadFile) -> Dict[str, str]:
        extension = "bin"
        if file.filename and "." in file.filename:
            extension = file.filename.rsplit(".", 1)[-1].lower()
        public_id = f"{self.folder}/{uuid.uuid4().hex}.{extension}"

        file.file.seek(0)
        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=public_id,
            Body=file.file.read(),
            ContentType=file.content_type or "application/octet-stream",
        )
        logger.info("Uploaded image %s", public_id)
        return {"public_id": public_id, "url": self.url_for(public_id)}

    def destroy(self, public_id: str) -> None:
        self.s3_client.delete_object(Bucket=self.bucket_name, Key=public_id)
        logger.info("Deleted image %s", public_id)

    async def upload_many(self, files: Iterable[UploadFile]) -> List[Dict[str, str]]:
        """Upload concurrently; results keep the order of ``files``.

        The first failure propagates. Uploads that already finished are
        left on the remote host.
        """
        return list(await asyncio.gather(*(run_in_threadpool(self.upload, f) for f in files)))

    async def destroy_many(self, public_ids: Iterable[str]) -> None:
        await asyncio.gather(*(run_in_threadpool(self.destroy, public_id) for public_id in public_ids))


@lru_cache()
def get_image_storage() -> ImageStorage:
    return ImageStorage()
