"""Conversions between Pillow images, numpy arrays and Qt images."""

import numpy as np
from PIL import Image
from PyQt5.QtGui import QImage, QPixmap


def pil_to_qimage(img: Image.Image) -> QImage:
    """Convert a Pillow image to a detached RGBA QImage."""
    rgba = img.convert('RGBA')
    data = rgba.tobytes('raw', 'RGBA')
    qimage = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format_RGBA8888)
    # QImage does not own `data`; copy before it goes out of scope
    return qimage.copy()


def pil_to_qpixmap(img: Image.Image) -> QPixmap:
    return QPixmap.fromImage(pil_to_qimage(img))


def qimage_to_array(qimage: QImage) -> np.ndarray:
    """QImage -> (height, width, 4) uint8 RGBA array (un-premultiplied)."""
    converted = qimage.convertToFormat(QImage.Format_RGBA8888)
    width, height = converted.width(), converted.height()
    ptr = converted.constBits()
    ptr.setsize(converted.sizeInBytes())
    array = np.frombuffer(ptr, dtype=np.uint8).reshape((height, converted.bytesPerLine()))
    return array[:, :width * 4].reshape((height, width, 4)).copy()


def qimage_to_pil(qimage: QImage) -> Image.Image:
    return Image.fromarray(qimage_to_array(qimage))
