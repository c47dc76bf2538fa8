import io

import pytest
from PIL import Image

from flor.shared.core.exceptions import StorageError, ValidationError
from flor.shared.infrastructure.storage.photo_storage import PlantPhotoStorage

from ..conftest import OTHER_USER_ID, USER_ID, make_image


def decode(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


class TestProcessImage:

    def test_png_becomes_jpeg(self, photo_storage):
        processed = photo_storage.process_image(make_image("PNG"))

        image = decode(processed)
        assert image.format == "JPEG"
        assert image.size == (640, 480)

    def test_wide_images_are_scaled_down_proportionally(self, photo_storage):
        processed = photo_storage.process_image(make_image("JPEG", size=(3840, 2160)))

        assert decode(processed).size == (1920, 1080)

    def test_small_images_are_not_enlarged(self, photo_storage):
        processed = photo_storage.process_image(make_image("WEBP", size=(300, 200)))

        assert decode(processed).size == (300, 200)

    def test_rgba_is_flattened(self, photo_storage):
        buffer = io.BytesIO()
        Image.new("RGBA", (50, 50), (0, 128, 0, 100)).save(buffer, format="PNG")

        assert decode(photo_storage.process_image(buffer.getvalue())).mode == "RGB"

    def test_unsupported_format_rejected(self, photo_storage):
        with pytest.raises(ValidationError, match="Invalid image format"):
            photo_storage.process_image(make_image("GIF"))

    def test_garbage_rejected(self, photo_storage):
        with pytest.raises(ValidationError, match="Image processing failed"):
            photo_storage.process_image(b"definitely not an image")

    def test_oversized_input_rejected(self, photo_storage):
        photo_storage.max_input_bytes = 100

        with pytest.raises(ValidationError, match="Image must be smaller than"):
            photo_storage.process_image(make_image())


class TestBucketOperations:

    async def test_upload_stores_under_user_folder(self, photo_storage, store):
        url = await photo_storage.upload(USER_ID, make_image())

        [path] = store.bucket.objects
        assert path.startswith(f"{USER_ID}/") and path.endswith(".jpg")
        assert url == f"{store.bucket.public_base}/{path}"

    async def test_upload_failure_raises_storage_error(self, photo_storage, store):
        store.bucket.fail_upload = True

        with pytest.raises(StorageError):
            await photo_storage.upload(USER_ID, make_image())

    def test_path_from_url(self, photo_storage):
        url = "https://project.supabase.co/storage/v1/object/public/plant-photos/user-1/abc.jpg"

        assert photo_storage.path_from_url(url) == "user-1/abc.jpg"
        assert photo_storage.path_from_url("https://elsewhere.example/abc.jpg") is None

    async def test_delete_is_best_effort(self, photo_storage, store):
        url = await photo_storage.upload(USER_ID, make_image())
        store.bucket.fail_remove = True

        assert await photo_storage.delete(url, USER_ID) is False
        assert await photo_storage.delete("https://elsewhere.example/abc.jpg", USER_ID) is False

        store.bucket.fail_remove = False
        assert await photo_storage.delete(url, USER_ID) is True
        assert store.bucket.objects == {}

    @pytest.mark.parametrize(
        "path",
        [f"{OTHER_USER_ID}/abc.jpg", f"{USER_ID}/../{OTHER_USER_ID}/abc.jpg", f"{USER_ID}/nested/abc.jpg", "abc.jpg"],
    )
    async def test_delete_refuses_paths_outside_the_users_folder(self, photo_storage, store, path):
        store.bucket.objects[path] = b"jpeg"

        assert await photo_storage.delete(f"{store.bucket.public_base}/{path}", USER_ID) is False
        assert store.bucket.removed == []


def test_bucket_name_can_be_overridden(store):
    storage = PlantPhotoStorage(bucket=store.bucket, bucket_name="avatars")

    assert storage.path_from_url("https://x.supabase.co/storage/v1/object/public/avatars/u/1.jpg") == "u/1.jpg"
