"""Asset picker dialog for app images and backgrounds."""

import logging

from PyQt5.QtCore import Qt, QSize
from PyQt5.QtGui import QIcon
from PyQt5.QtWidgets import (
    QDialog, QVBoxLayout, QListWidget, QListWidgetItem, QDialogButtonBox, QAbstractItemView, QLabel,
)

from services.image_loader import load_image
from utils.errors import ImageLoadError
from utils.image_convert import pil_to_qpixmap

logger = logging.getLogger(__name__)

THUMBNAIL_SIZE = 96


class AssetPickerDialog(QDialog):
    """Grid of library assets.

    Args:
        assets: List of Asset records
        multi_select: Allow picking several assets (images) or one (backgrounds)
        session: Optional requests.Session for remote thumbnails
    """

    def __init__(self, assets, title, multi_select=True, session=None, parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumSize(480, 400)

        layout = QVBoxLayout(self)

        if not assets:
            layout.addWidget(QLabel("No assets available."))

        self.list_widget = QListWidget()
        self.list_widget.setViewMode(QListWidget.IconMode)
        self.list_widget.setIconSize(QSize(THUMBNAIL_SIZE, THUMBNAIL_SIZE))
        self.list_widget.setResizeMode(QListWidget.Adjust)
        self.list_widget.setSelectionMode(
            QAbstractItemView.MultiSelection if multi_select else QAbstractItemView.SingleSelection
        )
        for asset in assets:
            item = QListWidgetItem(asset.label or asset.id)
            item.setData(Qt.UserRole, asset)
            try:
                item.setIcon(QIcon(pil_to_qpixmap(load_image(asset.src, session))))
            except ImageLoadError as e:
                logger.warning("No thumbnail for asset %s: %s", asset.id, e)
            self.list_widget.addItem(item)
        if not multi_select:
            self.list_widget.itemDoubleClicked.connect(lambda _item: self.accept())
        layout.addWidget(self.list_widget)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.button(QDialogButtonBox.Ok).setText("Add" if multi_select else "Use")
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def selected_assets(self):
        return [item.data(Qt.UserRole) for item in self.list_widget.selectedItems()]
