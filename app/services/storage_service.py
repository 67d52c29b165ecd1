"""
Resume storage on the Supabase Storage bucket
"""
import logging

from app.core.exceptions import UploadError
from app.schemas.career import ResumeReference
from app.services.supabase_client import BackendError, BackendUnavailable, SupabaseClient
from app.utils.file_handler import AcceptedFile, generate_storage_key

logger = logging.getLogger(__name__)


class ResumeStorage:
    """Store accepted resumes and hand back their public URL"""

    def __init__(self, client: SupabaseClient, bucket: str):
        self.client = client
        self.bucket = bucket

    async def upload(self, resume: AcceptedFile) -> ResumeReference:
        """
        Upload a resume under a fresh key

        Raises:
            UploadError: 503 if the storage backend failed
        """
        storage_path = generate_storage_key(resume.content_type)
        try:
            await self.client.upload(self.bucket, storage_path, resume.content, resume.content_type)
        except (BackendError, BackendUnavailable) as e:
            logger.error(f"Resume upload to {self.bucket}/{storage_path} failed: {e}")
            raise UploadError(
                "We could not store your resume right now. Please try again later.",
                detail=f"File upload failed: {e}",
                status_code=503
            ) from e

        logger.info(f"Stored resume {storage_path} ({resume.size} bytes)")
        return ResumeReference(
            url=self.client.public_url(self.bucket, storage_path),
            file_name=resume.filename,
            storage_path=storage_path
        )

    async def delete(self, storage_path: str) -> bool:
        """
        Remove a stored resume

        Returns:
            bool: True if deleted, False if the backend refused
        """
        try:
            await self.client.remove(self.bucket, [storage_path])
            return True
        except (BackendError, BackendUnavailable) as e:
            logger.error(f"Could not delete orphaned resume {storage_path}: {e}")
            return False
