"""
Field placement math.

Field descriptors are expressed as fractions of the page with a top-left
origin (the editor's coordinate system). PDF page space has a bottom-left
origin, so the only transform needed is a single axis flip: the distance
from the top (``y_ratio``) plus the box height is subtracted from the page
height to get the box's bottom edge.
"""

from dataclasses import dataclass

from app.schemas.document import FieldDescriptor
from app.utils.exceptions import DecodeError


@dataclass(frozen=True)
class FieldRect:
    """Box in page points, bottom-left origin."""
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class DrawBox:
    x: float
    y: float
    width: float
    height: float
    scale: float


def resolve_field_rect(field: FieldDescriptor, page_width: float, page_height: float) -> FieldRect:
    """Map a ratio-based field onto a page of the given size.

    Ratios are trusted as-is; values outside [0, 1] simply land off the page.
    The same transform applies to every field type.
    """
    x = field.x_ratio * page_width
    y = page_height - field.y_ratio * page_height - field.h_ratio * page_height
    w = field.w_ratio * page_width
    h = field.h_ratio * page_height
    return FieldRect(x=x, y=y, w=w, h=h)


def aspect_fit(image_width: float, image_height: float, rect: FieldRect) -> DrawBox:
    """Uniformly scale an image to fit inside ``rect`` and center it.

    The result never exceeds the rect in either axis and keeps the image's
    width/height ratio.
    """
    if image_width <= 0 or image_height <= 0:
        raise DecodeError(
            "Signature image has no drawable area",
            details={"image_width": image_width, "image_height": image_height},
        )

    scale = min(rect.w / image_width, rect.h / image_height)
    draw_w = image_width * scale
    draw_h = image_height * scale
    return DrawBox(
        x=rect.x + (rect.w - draw_w) / 2,
        y=rect.y + (rect.h - draw_h) / 2,
        width=draw_w,
        height=draw_h,
        scale=scale,
    )
