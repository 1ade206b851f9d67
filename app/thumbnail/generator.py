"""Downsized JPEG previews for uploaded images."""

import asyncio
import math

from PIL import Image

from app.ingestion.constants import (
    DEFAULT_THUMBNAIL_MAX_WIDTH,
    THUMBNAIL_JPEG_QUALITY,
    THUMBNAILABLE_MIME_TYPES,
)
from app.ingestion.outcomes import ArtifactOutcome, Failed, Produced, Skipped
from app.logging.logger import Log
from app.thumbnail.codecs import Decoder, Encoder, ImageCodecs, LazyCodec, Resizer


def scaled_height(width: int, height: int, max_width: int) -> int:
    """Height that keeps the aspect ratio at ``max_width``, rounded half up."""
    return max(1, math.floor(height * max_width / width + 0.5))


class ThumbnailGenerator:
    """Creates JPEG thumbnails for JPEG and PNG images wider than ``max_width``.

    Never raises: unsupported formats and small images are ``Skipped``, any
    decode/resize/encode problem is logged and returned as ``Failed``.
    """

    def __init__(
        self,
        codecs: ImageCodecs,
        *,
        jpeg_quality: int = THUMBNAIL_JPEG_QUALITY,
        default_max_width: int = DEFAULT_THUMBNAIL_MAX_WIDTH,
    ) -> None:
        if default_max_width < 1:
            raise ValueError(f"default_max_width must be positive, got {default_max_width}")
        self._codecs = codecs
        self._jpeg_quality = jpeg_quality
        self._default_max_width = default_max_width

    async def create_thumbnail(
        self,
        data: bytes,
        mime_type: str,
        max_width: int | None = None,
    ) -> ArtifactOutcome[bytes]:
        if max_width is None:
            max_width = self._default_max_width
        if mime_type not in THUMBNAILABLE_MIME_TYPES:
            Log.info(f"Thumbnail generation skipped for unsupported format: {mime_type}")
            return Skipped(f"unsupported format {mime_type}")
        if max_width < 1:
            Log.error(f"Thumbnail generation rejected: invalid maxWidth {max_width}")
            return Failed(f"max_width must be positive, got {max_width}")

        try:
            decoder = await self._decoder_codec(mime_type).ensure_ready()
            image = await asyncio.to_thread(decoder, data)
            width, height = image.size
            if width <= max_width:
                Log.info(
                    f"Thumbnail generation skipped: image width ({width}px) "
                    f"<= maxWidth ({max_width}px)"
                )
                return Skipped(f"image width {width}px <= {max_width}px")

            new_height = scaled_height(width, height, max_width)
            Log.info(f"Resizing image from {width}x{height} to {max_width}x{new_height}")
            resizer = await self._codecs.resizer.ensure_ready()
            encoder = await self._codecs.jpeg_encoder.ensure_ready()
            thumbnail = await asyncio.to_thread(
                self._resize_and_encode,
                resizer,
                encoder,
                image,
                (max_width, new_height),
            )
        except Exception as exc:
            Log.error(f"Thumbnail generation failed: {exc}", exc=exc, mime_type=mime_type)
            return Failed(f"{type(exc).__name__}: {exc}")

        Log.info(f"Thumbnail generated successfully: {len(thumbnail)} bytes")
        return Produced(thumbnail)

    async def create_thumbnail_or_none(
        self,
        data: bytes,
        mime_type: str,
        max_width: int | None = None,
    ) -> bytes | None:
        return (await self.create_thumbnail(data, mime_type, max_width)).value_or_none()

    def _decoder_codec(self, mime_type: str) -> LazyCodec[Decoder]:
        if mime_type == "image/png":
            return self._codecs.png_decoder
        return self._codecs.jpeg_decoder

    def _resize_and_encode(
        self,
        resizer: Resizer,
        encoder: Encoder,
        image: Image.Image,
        size: tuple[int, int],
    ) -> bytes:
        resized = resizer(image, size)
        return encoder(resized, self._jpeg_quality)
