from __future__ import annotations

import asyncio
import base64
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from compliance_docs.core.errors import PhotoDecodeError
from compliance_docs.core.layout import PHOTO_SLOT_IDS
from compliance_docs.domain.wizard import PhotoAsset

PREVIEW_MAX_PX = 320

# formats Excel renders when embedded in a workbook; anything else is re-encoded as PNG
_EMBEDDABLE_EXTENSIONS = {
    "JPEG": "jpeg",
    "PNG": "png",
    "GIF": "gif",
    "BMP": "bmp",
}


def _as_png(image: Image.Image) -> bytes:
    converted = image if image.mode in ("RGB", "RGBA", "L", "LA", "P") else image.convert("RGBA")
    buffer = BytesIO()
    converted.save(buffer, format="PNG")
    return buffer.getvalue()


def _decode(slot_id: str, filename: str, data: bytes) -> PhotoAsset:
    if not data:
        raise PhotoDecodeError(f"{filename or slot_id}: file kosong")
    try:
        with Image.open(BytesIO(data)) as probe:
            probe.verify()
        # verify() leaves the image unusable, so reopen for the thumbnail
        with Image.open(BytesIO(data)) as image:
            extension = _EMBEDDABLE_EXTENSIONS.get(image.format or "")
            if extension is None:
                data = _as_png(image)
                extension = "png"
            thumb = image.convert("RGB") if image.mode not in ("RGB", "L") else image.copy()
            thumb.thumbnail((PREVIEW_MAX_PX, PREVIEW_MAX_PX))
            buffer = BytesIO()
            thumb.save(buffer, format="PNG")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise PhotoDecodeError(f"{filename or slot_id}: gagal membaca gambar ({exc})") from exc

    preview = "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")
    return PhotoAsset(
        slot_id=slot_id,
        filename=filename or f"{slot_id}.{extension}",
        extension=extension,
        data=bytes(data),
        preview=preview,
    )


async def ingest_photo(slot_id: str, filename: str, data: bytes) -> PhotoAsset:
    """Decode an uploaded photo off the event loop and bind it to ``slot_id``.

    The stored bytes are always in a format the ATP workbook can embed.
    """

    if slot_id not in PHOTO_SLOT_IDS:
        raise ValueError(f"unknown photo slot: {slot_id}")
    return await asyncio.to_thread(_decode, slot_id, filename, data)


__all__ = ["PREVIEW_MAX_PX", "ingest_photo"]
