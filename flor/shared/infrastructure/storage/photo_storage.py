# 📄 File: flor/shared/infrastructure/storage/photo_storage.py

# 🧭 Purpose (Layman Explanation):
# Shrinks and tidies plant photos before saving them in the cloud, and removes
# old photos when a plant is deleted.

# 🧪 Purpose (Technical Summary):
# Pillow-based image normalisation (format check, EXIF orientation, width cap, JPEG
# recompression, size limits) and Supabase Storage upload/delete for the plant photo bucket.

# 🔗 Dependencies:
# - PIL (Pillow): Image processing and optimization
# - supabase: Storage bucket API (via flor.shared.config.supabase)

# 🔄 Connected Modules / Calls From:
# Called by: plant photo upload endpoint, PlantService.delete_plant

import io
import logging
from typing import Optional
from uuid import uuid4

from PIL import Image, ImageOps, UnidentifiedImageError

from flor.shared.config.settings import get_settings
from flor.shared.config.supabase import get_supabase_manager
from flor.shared.core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

ACCEPTED_FORMATS = {"JPEG", "PNG", "WEBP"}


class PlantPhotoStorage:
    """
    Plant photo storage backed by one Supabase Storage bucket.

    Files are stored as ``{user_id}/{uuid}.jpg``.
    """

    def __init__(self, bucket=None, bucket_name: Optional[str] = None):
        settings = get_settings()
        self.bucket_name = bucket_name or settings.SUPABASE_STORAGE_BUCKET
        self._bucket = bucket
        self.max_input_bytes = settings.MAX_IMAGE_INPUT_BYTES
        self.max_output_bytes = settings.MAX_IMAGE_OUTPUT_BYTES
        self.max_width = settings.IMAGE_MAX_WIDTH
        self.quality = settings.IMAGE_QUALITY

    @property
    def bucket(self):
        if self._bucket is None:
            self._bucket = get_supabase_manager().get_storage_bucket(self.bucket_name)
        return self._bucket

    def process_image(self, image_data: bytes) -> bytes:
        """
        Normalise an uploaded image for storage.

        Rejects inputs over the input limit and formats other than JPEG, PNG
        and WebP. Applies EXIF orientation, caps the width without
        enlarging and re-encodes as progressive JPEG.

        Raises:
            ValidationError: If the image is unusable or too large
        """
        if len(image_data) > self.max_input_bytes:
            raise ValidationError(
                f"Image must be smaller than {self.max_input_bytes // (1024 * 1024)}MB",
                field="photo"
            )

        try:
            with Image.open(io.BytesIO(image_data)) as img:
                if img.format not in ACCEPTED_FORMATS:
                    raise ValidationError(
                        "Invalid image format. Accepted formats: JPG, PNG, WEBP",
                        field="photo",
                        value=img.format
                    )

                img = ImageOps.exif_transpose(img)
                if img.mode != "RGB":
                    img = img.convert("RGB")

                if img.width > self.max_width:
                    height = round(img.height * self.max_width / img.width)
                    img = img.resize((self.max_width, height), Image.Resampling.LANCZOS)

                output = io.BytesIO()
                img.save(output, format="JPEG", quality=self.quality, optimize=True, progressive=True)
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationError(f"Image processing failed: {e}", field="photo") from e

        processed = output.getvalue()
        if len(processed) > self.max_output_bytes:
            raise ValidationError("Processed image is too large", field="photo")

        return processed

    def build_path(self, user_id: str) -> str:
        return f"{user_id}/{uuid4()}.jpg"

    def path_from_url(self, photo_url: str) -> Optional[str]:
        """Extract the object path that follows the bucket name in a public URL."""
        parts = photo_url.split("/")
        if self.bucket_name not in parts:
            return None
        index = parts.index(self.bucket_name)
        path = "/".join(parts[index + 1:])
        return path or None

    async def upload(self, user_id: str, image_data: bytes) -> str:
        """
        Process and upload a plant photo.

        Returns:
            Public URL of the stored photo
        """
        processed = self.process_image(image_data)
        path = self.build_path(user_id)

        try:
            self.bucket.upload(
                path=path,
                file=processed,
                file_options={"content-type": "image/jpeg", "upsert": "false"}
            )
            public_url = self.bucket.get_public_url(path)
        except Exception as e:
            logger.error(f"Photo upload failed for {path}: {e}")
            raise StorageError(f"Upload failed: {e}", operation="upload", file_path=path) from e

        logger.info(f"Plant photo uploaded: {path}")
        return public_url

    def owns_path(self, path: str, user_id: str) -> bool:
        """Objects are stored as ``{user_id}/{name}``; anything else belongs to someone else."""
        segments = path.split("/")
        return len(segments) == 2 and segments[0] == user_id and segments[1] not in ("", ".", "..")

    async def delete(self, photo_url: str, user_id: str) -> bool:
        """Best-effort delete of one of ``user_id``'s photos; failures are logged, never raised."""
        path = self.path_from_url(photo_url)
        if path is None:
            logger.warning(f"Could not extract storage path from photo URL: {photo_url}")
            return False
        if not self.owns_path(path, user_id):
            logger.warning(f"Refusing to delete photo {path} outside the folder of user {user_id}")
            return False

        try:
            self.bucket.remove([path])
        except Exception as e:
            logger.error(f"Failed to delete photo {path}: {e}")
            return False

        logger.info(f"Plant photo deleted: {path}")
        return True


def get_photo_storage() -> PlantPhotoStorage:
    """FastAPI dependency for the plant photo storage."""
    return PlantPhotoStorage()
