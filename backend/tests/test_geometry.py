#!/usr/bin/env python3
"""Tests for field placement math"""

import random

import pytest

from app.schemas.document import FieldDescriptor
from app.services.geometry import FieldRect, aspect_fit, resolve_field_rect
from app.utils.exceptions import DecodeError


def _field(x, y, w, h, field_type="text"):
    return FieldDescriptor(page=1, type=field_type, xRatio=x, yRatio=y, wRatio=w, hRatio=h, value="v")


def test_letter_page_text_field():
    rect = resolve_field_rect(_field(0.1, 0.1, 0.3, 0.05), 612, 792)

    assert rect.x == pytest.approx(61.2)
    assert rect.y == pytest.approx(792 - 79.2 - 39.6)
    assert rect.y == pytest.approx(673.2)
    assert rect.w == pytest.approx(183.6)
    assert rect.h == pytest.approx(39.6)
    print("[PASS] letter page text field resolves to expected rect")


def test_top_left_origin_flip():
    # A box touching the top edge ends exactly at the page height.
    top = resolve_field_rect(_field(0, 0, 1, 0.25), 400, 800)
    assert top.y + top.h == pytest.approx(800)

    # A box touching the bottom edge starts at y=0.
    bottom = resolve_field_rect(_field(0, 0.75, 1, 0.25), 400, 800)
    assert bottom.y == pytest.approx(0)


def test_same_geometry_for_every_type():
    rects = {
        t: resolve_field_rect(_field(0.2, 0.3, 0.4, 0.1, t), 595, 842)
        for t in ("text", "date", "signature")
    }
    assert rects["text"] == rects["date"] == rects["signature"]


def test_y_within_page_when_box_fits():
    rng = random.Random(7)
    for _ in range(200):
        y_ratio = rng.random()
        h_ratio = rng.random() * (1 - y_ratio)
        width, height = rng.uniform(50, 2000), rng.uniform(50, 2000)
        rect = resolve_field_rect(_field(rng.random(), y_ratio, rng.random(), h_ratio), width, height)
        assert -1e-9 <= rect.y <= height + 1e-9


def test_scales_linearly_with_page_size():
    field = _field(0.15, 0.4, 0.2, 0.1)
    base = resolve_field_rect(field, 300, 500)
    doubled = resolve_field_rect(field, 600, 1000)

    assert doubled.x == pytest.approx(base.x * 2)
    assert doubled.y == pytest.approx(base.y * 2)
    assert doubled.w == pytest.approx(base.w * 2)
    assert doubled.h == pytest.approx(base.h * 2)


def test_ratios_are_not_clamped():
    rect = resolve_field_rect(_field(1.2, -0.1, 0.5, 0.5), 100, 100)
    assert rect.x == pytest.approx(120)
    assert rect.y == pytest.approx(60)


def test_aspect_fit_wide_image_in_square_box():
    box = aspect_fit(200, 100, FieldRect(x=0, y=0, w=100, h=100))

    assert box.scale == pytest.approx(0.5)
    assert box.width == pytest.approx(100)
    assert box.height == pytest.approx(50)
    assert box.x == pytest.approx(0)
    assert box.y == pytest.approx(25)
    print("[PASS] 200x100 image fits a 100x100 box at scale 0.5, centered")


def test_aspect_fit_tall_image_centers_horizontally():
    box = aspect_fit(50, 200, FieldRect(x=10, y=20, w=100, h=100))

    assert box.height == pytest.approx(100)
    assert box.width == pytest.approx(25)
    assert box.x == pytest.approx(10 + 37.5)
    assert box.y == pytest.approx(20)


def test_aspect_fit_never_exceeds_box_and_keeps_ratio():
    rng = random.Random(11)
    for _ in range(200):
        img_w, img_h = rng.randint(1, 4000), rng.randint(1, 4000)
        rect = FieldRect(x=rng.uniform(0, 500), y=rng.uniform(0, 500),
                         w=rng.uniform(1, 600), h=rng.uniform(1, 600))
        box = aspect_fit(img_w, img_h, rect)

        assert box.width <= rect.w + 1e-9
        assert box.height <= rect.h + 1e-9
        assert box.width / box.height == pytest.approx(img_w / img_h)
        assert box.x >= rect.x - 1e-9
        assert box.y >= rect.y - 1e-9


def test_aspect_fit_rejects_empty_image():
    with pytest.raises(DecodeError):
        aspect_fit(0, 10, FieldRect(x=0, y=0, w=10, h=10))
