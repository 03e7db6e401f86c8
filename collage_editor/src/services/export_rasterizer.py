"""Export Rasterizer Service.

Re-draws a collage document onto an offscreen QImage at output resolution
and encodes it as a PNG data URL. This is the artifact that gets persisted,
so it reproduces the live canvas independently of any widget:

1. Background scaled to cover the output (fallback fill when absent or
   unloadable).
2. Layers in paint order, each placed with the same transform the live
   canvas uses (utils.transform_math.layer_qtransform).
3. PNG encode through Pillow.

Bitmaps for every layer are fetched concurrently, but painted strictly in
document order. A layer whose bitmap fails to load is skipped and the
export carries on.
"""

import logging
import sys

from PyQt5.QtCore import Qt, QRectF
from PyQt5.QtGui import QImage, QPainter, QTransform
from PyQt5.QtWidgets import QApplication

from constants import CANVAS_WIDTH, CANVAS_HEIGHT, FALLBACK_FILL_COLOR
from models.layer import LayerKind
from services.image_loader import load_image_async, encode_png, png_data_url
from utils.errors import ImageLoadError
from utils.image_convert import pil_to_qimage, qimage_to_pil
from utils.ordered_await import in_document_order
from utils.text_layout import draw_text_layer, qcolor_for
from utils.transform_math import layer_qtransform, contain_rect, cover_rect

logger = logging.getLogger(__name__)

_BACKGROUND = object()


class ExportRasterizer:
    """Paints DocumentSnapshots into QImages.

    Args:
        session: Optional requests.Session for http(s) image sources
        loader: Coroutine function ``(src, session) -> PIL.Image``
        fallback_color: Fill used when there is no usable background
    """

    def __init__(self, session=None, loader=load_image_async, fallback_color=FALLBACK_FILL_COLOR):
        self._ensure_qapp()
        self.session = session
        self.loader = loader
        self.fallback_color = fallback_color

    @staticmethod
    def _ensure_qapp():
        """Return existing QApplication or create a headless one."""
        app = QApplication.instance()
        if app is None:
            app = QApplication(sys.argv)
        return app

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def rasterize(self, snapshot, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT,
                        device_pixel_ratio: float = 1.0) -> QImage:
        """Composite a snapshot into a new QImage.

        Args:
            snapshot: DocumentSnapshot (layers already in paint order)
            width, height: Output size in logical (viewport) pixels
            device_pixel_ratio: Output pixels per logical pixel

        Returns:
            QImage of size (width * dpr, height * dpr)
        """
        out_w = max(1, round(width * device_pixel_ratio))
        out_h = max(1, round(height * device_pixel_ratio))
        image = QImage(out_w, out_h, QImage.Format_ARGB32_Premultiplied)
        image.fill(Qt.transparent)

        device = QTransform.fromScale(device_pixel_ratio, device_pixel_ratio)

        jobs = []
        if snapshot.background is not None:
            jobs.append(_BACKGROUND)
        jobs.extend(snapshot.layers)

        painter = QPainter(image)
        try:
            painter.setRenderHints(QPainter.Antialiasing | QPainter.SmoothPixmapTransform
                                   | QPainter.TextAntialiasing)
            if snapshot.background is None:
                self._paint_fallback(painter, device, width, height)

            async for result in in_document_order(
                    jobs, lambda job: self._load(job, snapshot), catch=(ImageLoadError,)):
                if result.item is _BACKGROUND:
                    self._paint_background(painter, device, width, height, result)
                else:
                    self._paint_layer(painter, device, result)
        finally:
            painter.end()

        logger.info("Rasterized %d layer(s) at %dx%d", len(snapshot.layers), out_w, out_h)
        return image

    async def capture(self, document, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT,
                      device_pixel_ratio: float = 1.0) -> str:
        """Snapshot, rasterize and encode a document as a PNG data URL."""
        image = await self.rasterize(document.snapshot(), width, height, device_pixel_ratio)
        return png_data_url(encode_qimage_png(image))

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self, job, snapshot):
        if job is _BACKGROUND:
            return self.loader(snapshot.background.src, self.session)
        if job.kind is LayerKind.IMAGE:
            return self.loader(job.src, self.session)
        if job.kind is LayerKind.TEXT:
            return None
        raise TypeError(f"Unhandled layer kind: {job.kind!r}")

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def _paint_fallback(self, painter, device, width, height):
        painter.setTransform(device)
        painter.fillRect(QRectF(0, 0, width, height), qcolor_for(self.fallback_color))

    def _paint_background(self, painter, device, width, height, result):
        if not result.ok:
            logger.warning("Failed to load background for capture: %s", result.error)
            self._paint_fallback(painter, device, width, height)
            return
        bitmap = result.value
        x, y, draw_w, draw_h = cover_rect(bitmap.width, bitmap.height, width, height)
        painter.setTransform(device)
        painter.drawImage(QRectF(x, y, draw_w, draw_h), pil_to_qimage(bitmap))

    def _paint_layer(self, painter, device, result):
        layer = result.item
        painter.setTransform(layer_qtransform(layer) * device)

        if layer.kind is LayerKind.IMAGE:
            if not result.ok:
                logger.warning("Skipping image layer %s: %s", layer.id, result.error)
                return
            bitmap = result.value
            x, y, draw_w, draw_h = contain_rect(bitmap.width, bitmap.height)
            painter.drawImage(QRectF(x, y, draw_w, draw_h), pil_to_qimage(bitmap))
        elif layer.kind is LayerKind.TEXT:
            draw_text_layer(painter, layer)
        else:
            raise TypeError(f"Unhandled layer kind: {layer.kind!r}")


def encode_qimage_png(image: QImage) -> bytes:
    """PNG-encode a QImage via Pillow."""
    return encode_png(qimage_to_pil(image))


async def capture_collage_as_png(document, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT,
                                 device_pixel_ratio: float = 1.0, session=None) -> str:
    """Rasterize ``document`` and return a ``data:image/png;base64,...`` URL."""
    rasterizer = ExportRasterizer(session=session)
    return await rasterizer.capture(document, width, height, device_pixel_ratio)
