try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import io

import pytest
from PIL import Image

from app.core.config import ImageSettings
from app.services.image_preparation import (
    ImageDecodeError,
    ImagePreparer,
    ImageTooLargeError,
    ImageTooSmallError,
)

try:
    from ._fakes import make_image_bytes
except ImportError:  # pragma: no cover - fallback for direct execution
    from _fakes import make_image_bytes  # type: ignore


def _noise_jpeg(width: int, height: int) -> bytes:
    noise = Image.effect_noise((width, height), 80).convert("RGB")
    buffer = io.BytesIO()
    noise.save(buffer, format="JPEG", quality=100)
    return buffer.getvalue()


def _encoded_size(raw: bytes, quality: int) -> int:
    with Image.open(io.BytesIO(raw)) as image:
        buffer = io.BytesIO()
        image.convert("RGB").save(buffer, format="JPEG", quality=quality, optimize=True)
        return len(buffer.getvalue())


def test_prepare_keeps_valid_image_dimensions():
    preparer = ImagePreparer(ImageSettings())

    prepared = preparer.prepare_sync(make_image_bytes(1000, 1000))

    assert (prepared.width, prepared.height) == (1000, 1000)
    assert prepared.quality == 92
    assert prepared.data.startswith(b"\xff\xd8")
    assert prepared.encoded_size == len(prepared.data)


def test_prepare_rejects_images_below_minimum_dimension():
    preparer = ImagePreparer(ImageSettings())

    with pytest.raises(ImageTooSmallError) as excinfo:
        preparer.prepare_sync(make_image_bytes(200, 200))

    assert "too small" in str(excinfo.value).lower()


def test_prepare_measures_the_longer_side_only():
    preparer = ImagePreparer(ImageSettings())

    prepared = preparer.prepare_sync(make_image_bytes(400, 600))

    assert (prepared.width, prepared.height) == (400, 600)


def test_prepare_downscales_oversized_images_preserving_aspect_ratio():
    preparer = ImagePreparer(ImageSettings())

    prepared = preparer.prepare_sync(make_image_bytes(3000, 1500))

    assert (prepared.width, prepared.height) == (1536, 768)


def test_prepare_leaves_images_at_the_upper_bound_untouched():
    preparer = ImagePreparer(ImageSettings())

    prepared = preparer.prepare_sync(make_image_bytes(2048, 1000))

    assert (prepared.width, prepared.height) == (2048, 1000)


def test_prepare_lowers_quality_until_the_size_limit_is_met():
    raw = _noise_jpeg(800, 800)
    high, low = _encoded_size(raw, 92), _encoded_size(raw, 60)
    assert high > low + 1
    preparer = ImagePreparer(ImageSettings(max_bytes=low + 1))

    prepared = preparer.prepare_sync(raw)

    assert 60 <= prepared.quality < 92
    assert prepared.encoded_size <= low + 1


def test_prepare_rejects_images_still_too_large_at_minimum_quality():
    preparer = ImagePreparer(ImageSettings(max_bytes=200))

    with pytest.raises(ImageTooLargeError) as excinfo:
        preparer.prepare_sync(_noise_jpeg(600, 600))

    assert "too large" in str(excinfo.value).lower()


def test_prepare_applies_exif_orientation():
    exif = Image.Exif()
    exif[0x0112] = 6  # rotated 90 degrees clockwise
    buffer = io.BytesIO()
    Image.new("RGB", (1000, 600), (10, 20, 30)).save(buffer, format="JPEG", exif=exif)
    preparer = ImagePreparer(ImageSettings())

    prepared = preparer.prepare_sync(buffer.getvalue())

    assert (prepared.width, prepared.height) == (600, 1000)


def test_prepare_converts_transparent_png_to_jpeg():
    preparer = ImagePreparer(ImageSettings())

    prepared = preparer.prepare_sync(make_image_bytes(800, 700, fmt="PNG"))

    assert prepared.data.startswith(b"\xff\xd8")


@pytest.mark.parametrize("payload", [b"", b"definitely not an image"])
def test_prepare_raises_decode_error_for_unreadable_payloads(payload):
    preparer = ImagePreparer(ImageSettings())

    with pytest.raises(ImageDecodeError):
        preparer.prepare_sync(payload)


@pytest.mark.asyncio
async def test_prepare_runs_off_the_event_loop():
    preparer = ImagePreparer(ImageSettings())

    prepared = await preparer.prepare(make_image_bytes(1200, 900))

    assert (prepared.width, prepared.height) == (1200, 900)
