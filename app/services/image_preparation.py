"""Normalize arbitrary uploaded images into bounded, analyzable JPEGs."""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from app.core.config import ImageSettings

logger = logging.getLogger(__name__)


class ImageRejectedError(ValueError):
    """Base class for images that fail validation and must not be analyzed."""


class ImageTooSmallError(ImageRejectedError):
    pass


class ImageTooLargeError(ImageRejectedError):
    pass


class ImageDecodeError(ValueError):
    """Raised when the payload is not a decodable image."""


@dataclass(slots=True)
class PreparedImage:
    """JPEG bytes ready to send to the oracle."""

    data: bytes
    width: int
    height: int
    quality: int

    @property
    def encoded_size(self) -> int:
        return len(self.data)


class ImagePreparer:
    """Validate dimensions, downscale oversized images and re-encode as JPEG."""

    def __init__(self, settings: ImageSettings) -> None:
        self._settings = settings

    async def prepare(self, raw: bytes) -> PreparedImage:
        return await asyncio.to_thread(self.prepare_sync, raw)

    def prepare_sync(self, raw: bytes) -> PreparedImage:
        settings = self._settings
        image = _decode(raw)
        width, height = image.size
        logger.info(
            "Received image: %dx%d, %dKB", width, height, round(len(raw) / 1024)
        )

        longest = max(width, height)
        if longest < settings.min_dimension:
            raise ImageTooSmallError(
                "Image too small for quality analysis "
                f"(minimum {settings.min_dimension}px)"
            )

        if longest > settings.max_dimension:
            # thumbnail() keeps the aspect ratio and never enlarges.
            image.thumbnail(
                (settings.resize_target, settings.resize_target),
                Image.Resampling.LANCZOS,
            )
            logger.info(
                "Resized oversized image from %dx%d to %dx%d",
                width,
                height,
                *image.size,
            )

        quality = settings.initial_quality
        encoded = _encode_jpeg(image, quality)
        while len(encoded) > settings.max_bytes and quality > settings.min_quality:
            quality = max(quality - settings.quality_step, settings.min_quality)
            logger.info("Compressing image to quality %d", quality)
            encoded = _encode_jpeg(image, quality)

        if len(encoded) > settings.max_bytes:
            raise ImageTooLargeError(
                "Image too large "
                f"(maximum {settings.max_bytes // (1024 * 1024)}MB after processing)"
            )

        return PreparedImage(
            data=encoded,
            width=image.size[0],
            height=image.size[1],
            quality=quality,
        )


def _decode(raw: bytes) -> Image.Image:
    if not raw:
        raise ImageDecodeError("Photo payload is empty")
    try:
        with Image.open(io.BytesIO(raw)) as opened:
            oriented = ImageOps.exif_transpose(opened)
            return oriented.convert("RGB")
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(f"Unable to decode image: {exc}") from exc


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


__all__ = [
    "ImageDecodeError",
    "ImagePreparer",
    "ImageRejectedError",
    "ImageTooLargeError",
    "ImageTooSmallError",
    "PreparedImage",
]
