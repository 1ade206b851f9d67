"""Lazily initialized image codec handles.

Each codec is initialized at most once per process, on first use. Concurrent
first callers share one in-flight initialization; a failed initialization
returns the codec to ``UNINITIALIZED`` so the next call retries.
"""

import asyncio
import concurrent.futures
import io
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from PIL import Image, features

from app.ingestion.exceptions import CodecUnavailableError
from app.logging.logger import Log

H = TypeVar("H")

Decoder = Callable[[bytes], Image.Image]
Resizer = Callable[[Image.Image, tuple[int, int]], Image.Image]
Encoder = Callable[[Image.Image, int], bytes]


class CodecState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class LazyCodec(Generic[H]):
    """Once-only initialization of one codec, awaitable from any event loop."""

    def __init__(self, name: str, initializer: Callable[[], H]) -> None:
        self._name = name
        self._initializer = initializer
        self._lock = threading.Lock()
        self._state = CodecState.UNINITIALIZED
        self._handle: H | None = None
        self._future: concurrent.futures.Future[H] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> CodecState:
        return self._state

    async def ensure_ready(self) -> H:
        """Return the codec handle, initializing it first if needed.

        Raises:
            CodecUnavailableError: if initialization fails.
        """
        start = False
        with self._lock:
            if self._state is CodecState.READY and self._handle is not None:
                return self._handle
            if self._future is None:
                self._future = concurrent.futures.Future()
                self._state = CodecState.INITIALIZING
                start = True
            future = self._future

        if start:
            asyncio.get_running_loop().run_in_executor(None, self._initialize, future)
        # A cancelled waiter must not cancel the initialization other callers share.
        return await asyncio.shield(asyncio.wrap_future(future))

    def _initialize(self, future: "concurrent.futures.Future[H]") -> None:
        Log.info(f"Initializing image codec: {self._name}")
        try:
            handle = self._initializer()
        except Exception as exc:
            with self._lock:
                self._state = CodecState.UNINITIALIZED
                self._future = None
            future.set_exception(
                CodecUnavailableError(f"Codec {self._name} failed to initialize: {exc}")
            )
            return
        with self._lock:
            self._handle = handle
            self._state = CodecState.READY
        future.set_result(handle)


def _require_codec(codec: str) -> None:
    Image.preinit()
    if not features.check_codec(codec):
        raise RuntimeError(f"Pillow was built without the {codec} codec")


def _decoder_for(format_name: str) -> Decoder:
    def decode(data: bytes) -> Image.Image:
        with Image.open(io.BytesIO(data), formats=[format_name]) as image:
            image.load()
            return image.copy()

    return decode


def init_jpeg_decoder() -> Decoder:
    _require_codec("jpg")
    return _decoder_for("JPEG")


def init_png_decoder() -> Decoder:
    _require_codec("zlib")
    return _decoder_for("PNG")


def _resize(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    return image.resize(size, Image.Resampling.LANCZOS)


def init_resizer() -> Resizer:
    _resize(Image.new("RGB", (4, 4)), (2, 2))
    return _resize


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    buf = io.BytesIO()
    image.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def init_jpeg_encoder() -> Encoder:
    _require_codec("jpg")
    _encode_jpeg(Image.new("RGB", (1, 1)), 80)
    return _encode_jpeg


@dataclass(frozen=True)
class ImageCodecs:
    """The codec handles the thumbnail generator needs.

    Build one per process with ``ImageCodecs.create()`` and share it.
    """

    jpeg_decoder: LazyCodec[Decoder]
    png_decoder: LazyCodec[Decoder]
    resizer: LazyCodec[Resizer]
    jpeg_encoder: LazyCodec[Encoder]

    @classmethod
    def create(cls) -> "ImageCodecs":
        return cls(
            jpeg_decoder=LazyCodec("jpeg-decode", init_jpeg_decoder),
            png_decoder=LazyCodec("png-decode", init_png_decoder),
            resizer=LazyCodec("resize", init_resizer),
            jpeg_encoder=LazyCodec("jpeg-encode", init_jpeg_encoder),
        )
