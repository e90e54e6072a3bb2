"""
Per-field drawing onto a reportlab overlay canvas.

Every call only adds drawing instructions; nothing already on the page is
touched. The overlay is merged onto the real page by the overlay service.
"""

import base64
import binascii
import io
import logging
import re
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from app.config import settings
from app.schemas.document import FieldDescriptor
from app.services.geometry import DrawBox, FieldRect, aspect_fit
from app.utils.exceptions import DecodeError

logger = logging.getLogger(__name__)

# Baseline sits this far up the box so single-line text looks roughly centered.
TEXT_BASELINE_RATIO = 0.35

DATA_URI_PREFIX = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)

MIME_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
}


def split_data_uri(value: str) -> Tuple[Optional[str], str]:
    """Return (declared mime or None, base64 payload)."""
    match = DATA_URI_PREFIX.match(value)
    if not match:
        return None, value
    return match.group(1).lower(), value[match.end():]


def select_image_format(value: str, declared_mime: Optional[str]) -> str:
    """Pick PNG or JPEG for a signature value.

    A declared data-URI MIME type wins. Bare base64 values fall back to the
    legacy rule: anything mentioning "jpeg" is JPEG, everything else PNG.
    """
    if declared_mime is not None:
        image_format = MIME_FORMATS.get(declared_mime)
        if image_format is None:
            raise DecodeError(
                f"Unsupported signature image type: {declared_mime}",
                field="value",
                details={"mime_type": declared_mime, "supported": sorted(MIME_FORMATS)},
            )
        return image_format
    return "JPEG" if "jpeg" in value else "PNG"


def decode_signature_image(value: str) -> Image.Image:
    """Decode a signature data URI into a loaded Pillow image."""
    declared_mime, payload = split_data_uri(value.strip())
    image_format = select_image_format(value, declared_mime)

    payload = "".join(payload.split())
    payload += "=" * (-len(payload) % 4)
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("Signature image is not valid base64", field="value") from exc

    try:
        image = Image.open(io.BytesIO(raw), formats=[image_format])
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeError(
            f"Signature image could not be decoded as {image_format}",
            field="value",
            details={"format": image_format, "reason": str(exc)},
        ) from exc

    return image


class FieldRenderer:
    """Draws text, date and signature fields into resolved rectangles."""

    def __init__(self, font_name: str = None, font_size: float = None):
        self.font_name = font_name or settings.text_font_name
        self.font_size = font_size or settings.text_font_size

    def render(self, pdf: canvas.Canvas, rect: FieldRect, field: FieldDescriptor) -> bool:
        """Draw ``field`` into ``rect``. Returns False when there was nothing to draw."""
        if not field.value:
            return False

        if field.type in ("text", "date"):
            self.draw_text(pdf, rect, field.value)
        elif field.type == "signature":
            self.draw_signature(pdf, rect, field.value)
        else:
            return False
        return True

    def draw_text(self, pdf: canvas.Canvas, rect: FieldRect, text: str) -> None:
        # No wrapping: long values overflow the box.
        pdf.setFont(self.font_name, self.font_size)
        pdf.setFillColorRGB(0, 0, 0)
        pdf.drawString(rect.x, rect.y + rect.h * TEXT_BASELINE_RATIO, text)

    def draw_signature(self, pdf: canvas.Canvas, rect: FieldRect, value: str) -> DrawBox:
        image = decode_signature_image(value)
        img_width, img_height = image.size
        box = aspect_fit(img_width, img_height, rect)

        logger.debug(
            f"Signature {img_width}x{img_height} scaled by {box.scale:.4f} "
            f"to {box.width:.2f}x{box.height:.2f} at ({box.x:.2f}, {box.y:.2f})"
        )

        pdf.drawImage(
            ImageReader(image),
            box.x,
            box.y,
            width=box.width,
            height=box.height,
            mask="auto",
        )
        return box
