"""Font and text-box helpers shared by the live canvas and the rasterizer."""

from PyQt5.QtCore import Qt, QRectF
from PyQt5.QtGui import QFont, QFontMetricsF, QColor

from constants import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, DEFAULT_TEXT_COLOR

TEXT_FLAGS = Qt.AlignLeft | Qt.AlignTop
_LAYOUT_LIMIT = 100000.0


def parse_font_families(css_families: str):
    """Split a CSS font-family list into bare family names.

    '-apple-system, "Segoe UI", sans-serif' -> ['-apple-system', 'Segoe UI', 'sans-serif']
    """
    families = []
    for part in (css_families or DEFAULT_FONT_FAMILY).split(','):
        name = part.strip().strip('"\'').strip()
        if name:
            families.append(name)
    return families


def qfont_for(layer) -> QFont:
    """QFont for a text layer: its family stack at its pixel size."""
    font = QFont()
    families = parse_font_families(layer.font_family)
    font.setFamily(families[0] if families else '')
    if hasattr(font, 'setFamilies'):
        font.setFamilies(families)
    if 'sans-serif' in families:
        font.setStyleHint(QFont.SansSerif)
    elif 'serif' in families:
        font.setStyleHint(QFont.Serif)
    elif 'monospace' in families:
        font.setStyleHint(QFont.Monospace)
    font.setPixelSize(max(1, int(layer.font_size or DEFAULT_FONT_SIZE)))
    return font


def qcolor_for(value: str, default: str = DEFAULT_TEXT_COLOR) -> QColor:
    """Parse a CSS-style color, falling back to ``default`` when invalid."""
    color = QColor(value) if value else QColor()
    return color if color.isValid() else QColor(default)


def text_rect(layer) -> QRectF:
    """Box the layer's text occupies, anchored at its local origin (0, 0)."""
    metrics = QFontMetricsF(qfont_for(layer))
    rect = metrics.boundingRect(QRectF(0, 0, _LAYOUT_LIMIT, _LAYOUT_LIMIT),
                                int(TEXT_FLAGS), layer.display_text)
    return QRectF(0, 0, rect.width(), rect.height())


def draw_text_layer(painter, layer):
    """Paint a text layer left/top aligned at the painter's origin."""
    painter.setFont(qfont_for(layer))
    painter.setPen(qcolor_for(layer.color))
    painter.drawText(QRectF(0, 0, _LAYOUT_LIMIT, _LAYOUT_LIMIT), int(TEXT_FLAGS), layer.display_text)
