import base64
from typing import Protocol

from src.schemas.style import EncodedImage

DEFAULT_MIME_TYPE = "image/jpeg"
GENERIC_MIME_TYPES = ("", "application/octet-stream")

# (offset, magic bytes, media type)
_SIGNATURES: list[tuple[int, bytes, str]] = [
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (8, b"WEBP", "image/webp"),
]


class ImageBlob(Protocol):
    content_type: str | None

    async def read(self) -> bytes: ...


def detect_mime_type(content: bytes) -> str:
    for offset, magic, media_type in _SIGNATURES:
        if content[offset : offset + len(magic)] == magic:
            if media_type == "image/webp" and content[:4] != b"RIFF":
                continue
            return media_type
    return DEFAULT_MIME_TYPE


def to_data_uri(image: EncodedImage) -> str:
    return f"data:{image.mime_type};base64,{image.data}"


async def encode(blob: ImageBlob) -> EncodedImage:
    """Read the whole blob and return its base64 payload with the MIME type.

    The read happens exactly once and any error it raises reaches the caller
    unchanged. A missing or generic content type is replaced by the one
    sniffed from the payload.
    """
    content = await blob.read()
    mime_type = blob.content_type or ""
    if mime_type in GENERIC_MIME_TYPES:
        mime_type = detect_mime_type(content)
    return EncodedImage(data=base64.b64encode(content).decode(), mime_type=mime_type)
