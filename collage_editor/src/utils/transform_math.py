"""
Collage Editor - Transform Math Utilities

Geometry shared by the live canvas and the export rasterizer. Both renderers
place a layer with the same affine transform so the preview and the exported
image agree:

    translate(x, y) -> scale(s) -> rotate(r)     about the layer origin

The origin is the centre of the 120x120 box for image layers and the
top-left corner for text layers.
"""

import math

from PyQt5.QtGui import QTransform

from constants import LAYER_BASE_SIZE, LAYER_HALF_SIZE
from models.layer import LayerKind


def layer_origin(layer):
    """Pivot of a layer's scale/rotation, in item-local coordinates."""
    if layer.kind is LayerKind.IMAGE:
        return LAYER_HALF_SIZE, LAYER_HALF_SIZE
    if layer.kind is LayerKind.TEXT:
        return 0.0, 0.0
    raise TypeError(f"Unhandled layer kind: {layer.kind!r}")


def layer_affine(layer):
    """Affine matrix mapping item-local points to viewport pixels.

    Returns:
        (m11, m12, m21, m22, dx, dy) in Qt's row-vector convention:
        x' = m11*x + m21*y + dx, y' = m12*x + m22*y + dy
    """
    ox, oy = layer_origin(layer)
    theta = math.radians(layer.rotation)
    cos_t = math.cos(theta) * layer.scale
    sin_t = math.sin(theta) * layer.scale

    m11, m12 = cos_t, sin_t
    m21, m22 = -sin_t, cos_t
    dx = layer.x + ox - (m11 * ox + m21 * oy)
    dy = layer.y + oy - (m12 * ox + m22 * oy)
    return m11, m12, m21, m22, dx, dy


def map_point(layer, local_x, local_y):
    """Map an item-local point to viewport pixels."""
    m11, m12, m21, m22, dx, dy = layer_affine(layer)
    return m11 * local_x + m21 * local_y + dx, m12 * local_x + m22 * local_y + dy


def layer_qtransform(layer) -> QTransform:
    """layer_affine as a QTransform for QGraphicsItem/QPainter use."""
    m11, m12, m21, m22, dx, dy = layer_affine(layer)
    return QTransform(m11, m12, m21, m22, dx, dy)


def contain_size(img_w, img_h, box_w=LAYER_BASE_SIZE, box_h=LAYER_BASE_SIZE):
    """Largest size with the image's aspect ratio that fits inside the box.

    Returns:
        (width, height)
    """
    if img_w <= 0 or img_h <= 0:
        return 0.0, 0.0
    img_ratio = img_w / img_h
    box_ratio = box_w / box_h
    if img_ratio > box_ratio:
        return float(box_w), box_w / img_ratio
    return box_h * img_ratio, float(box_h)


def contain_rect(img_w, img_h, box_w=LAYER_BASE_SIZE, box_h=LAYER_BASE_SIZE):
    """contain_size centred in the box: (x, y, width, height)."""
    draw_w, draw_h = contain_size(img_w, img_h, box_w, box_h)
    return (box_w - draw_w) / 2, (box_h - draw_h) / 2, draw_w, draw_h


def cover_rect(img_w, img_h, target_w, target_h):
    """Scale-to-cover placement: fills the target, crops overflow, centred.

    Returns:
        (x, y, width, height) where x or y may be negative
    """
    if img_w <= 0 or img_h <= 0:
        return 0.0, 0.0, float(target_w), float(target_h)
    img_ratio = img_w / img_h
    target_ratio = target_w / target_h
    if img_ratio > target_ratio:
        draw_h = float(target_h)
        draw_w = img_w * (target_h / img_h)
        return (target_w - draw_w) / 2, 0.0, draw_w, draw_h
    draw_w = float(target_w)
    draw_h = img_h * (target_w / img_w)
    return 0.0, (target_h - draw_h) / 2, draw_w, draw_h
