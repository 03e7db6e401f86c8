"""Toolbar and finish-flow handlers for CollageEditor"""

import base64
import logging

from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import QFileDialog, QInputDialog, QMessageBox, QColorDialog

from components.asset_picker_dialog import AssetPickerDialog
from constants import (
	TEXT_FONT_CHOICES, TEXT_COLOR_SWATCHES, VISIBILITY_PUBLIC, VISIBILITY_PRIVATE,
	PNG_DATA_URL_PREFIX,
)
from utils.errors import InputError, ImageLoadError, ApiError
from utils.logger import show_alert

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.bmp *.webp)"


class ActionsMixin:
	"""Slots for every editing action; controller does the work"""

	def _run_action(self, action, *args):
		"""Run a controller action, turning expected failures into alerts

		Returns:
			The action's result, or None if it failed
		"""
		try:
			return action(*args)
		except InputError as e:
			show_alert(str(e))
		except ImageLoadError as e:
			logger.error("Image load failed: %s", e)
			show_alert("That image could not be loaded.")
		except ApiError as e:
			logger.error("Backend request failed: %s", e)
			show_alert("Something went wrong talking to the server. Please try again.")
		return None

	# ============= Create =============

	def _on_add_from_gallery(self):
		paths, _ = QFileDialog.getOpenFileNames(self, "Add images", "", IMAGE_FILE_FILTER)
		if paths:
			added = self._run_action(self.controller.add_images_from_files, paths)
			if added is not None and len(added) < len(paths):
				show_alert(f"{len(paths) - len(added)} file(s) could not be read as images.")

	def _on_add_app_images(self):
		dialog = AssetPickerDialog(self.controller.catalog.images, "App images",
		                           multi_select=True, session=self.controller.api.session, parent=self)
		if dialog.exec_():
			ids = [asset.id for asset in dialog.selected_assets()]
			self._run_action(self.controller.add_library_images, ids)

	def _on_choose_background(self):
		dialog = AssetPickerDialog(self.controller.catalog.backgrounds, "Backgrounds",
		                           multi_select=False, session=self.controller.api.session, parent=self)
		if dialog.exec_():
			chosen = dialog.selected_assets()
			if chosen:
				self._run_action(self.controller.set_background, chosen[0].src)

	def _on_add_text(self):
		# With a text layer selected the button edits it instead
		if self.controller.selected_text_layer() is not None:
			self._on_edit_text()
			return
		self._run_action(self.controller.add_text_layer)

	# ============= Layer tools =============

	def _on_scale_slider(self, value):
		if self.controller.document.selected_layer is None:
			return
		self._run_action(self.controller.set_scale, value / 100)

	def _on_rotate_slider(self, value):
		if self.controller.document.selected_layer is None:
			return
		self._run_action(self.controller.set_rotation, value)

	def _on_bring_to_front(self):
		self._run_action(self.controller.bring_to_front)

	def _on_send_to_back(self):
		self._run_action(self.controller.send_to_back)

	def _on_delete_layer(self):
		self._run_action(self.controller.delete_selected)

	def _on_remove_background(self):
		self.remove_bg_button.setEnabled(False)
		original_text = self.remove_bg_button.text()
		self.remove_bg_button.setText("Removing...")
		try:
			self._run_action(self.controller.remove_background)
		finally:
			self.remove_bg_button.setText(original_text)
			self._update_layer_selection_ui()

	# ============= Text tools =============

	def _on_edit_text_requested(self, layer_id):
		self.controller.set_selected_layer(layer_id)
		self._on_edit_text()

	def _on_edit_text(self):
		layer = self.controller.selected_text_layer()
		if layer is None:
			show_alert("Select a text layer first.")
			return
		text, ok = QInputDialog.getMultiLineText(self, "Edit text", "Text:", layer.text)
		if ok:
			self._run_action(self.controller.edit_text, text)

	def _on_choose_font(self):
		if self.controller.selected_text_layer() is None:
			show_alert("Select a text layer first.")
			return
		names = [name for name, _family in TEXT_FONT_CHOICES]
		name, ok = QInputDialog.getItem(self, "Font", "Font:", names, 0, False)
		if ok:
			family = dict(TEXT_FONT_CHOICES)[name]
			self._run_action(self.controller.set_font_family, family)

	def _on_choose_color(self):
		layer = self.controller.selected_text_layer()
		if layer is None:
			show_alert("Select a text layer first.")
			return
		dialog = QColorDialog(self)
		for index, swatch in enumerate(TEXT_COLOR_SWATCHES):
			QColorDialog.setCustomColor(index, QColor(swatch))
		if dialog.exec_():
			self._run_action(self.controller.set_text_color, dialog.currentColor().name())

	# ============= Finish =============

	def _on_clear(self):
		self._run_action(self.controller.clear)

	def _on_done(self):
		if not self._run_action(self.controller.finish):
			return

		if not self.controller.is_logged_in:
			QMessageBox.information(self, "Almost there",
			                        "You need to be logged in to publish or save this collage.")
			self.controller.unsaved_final = False
			return

		box = QMessageBox(self)
		box.setWindowTitle("Finish collage")
		box.setText("What would you like to do with this collage?")
		publish = box.addButton("Publish", QMessageBox.AcceptRole)
		private = box.addButton("Save private", QMessageBox.AcceptRole)
		box.addButton(QMessageBox.Cancel)
		box.exec_()

		clicked = box.clickedButton()
		if clicked is publish:
			self._save(VISIBILITY_PUBLIC)
		elif clicked is private:
			self._save(VISIBILITY_PRIVATE)
		else:
			self.controller.unsaved_final = False

	def _save(self, visibility):
		record = self._run_action(self.controller.save, visibility)
		if record is None:
			return
		QMessageBox.information(
			self, "Saved",
			"Collage published!" if visibility == VISIBILITY_PUBLIC else "Collage saved as private.",
		)
		self._set_editing_visible(False)

	def _on_create_more(self):
		self.controller.create_more()
		self._set_editing_visible(True)

	def _on_export_png(self):
		if not self.controller.document.has_content():
			show_alert("Add at least one image or background before exporting.")
			return
		path, _ = QFileDialog.getSaveFileName(self, "Export PNG", "collage.png", "PNG (*.png)")
		if not path:
			return
		data_url = self.controller.capture_collage_as_png()
		try:
			with open(path, 'wb') as f:
				f.write(base64.b64decode(data_url[len(PNG_DATA_URL_PREFIX):]))
		except OSError as e:
			logger.error("Export to %s failed: %s", path, e)
			show_alert("Could not write the exported file.")

	# ============= Account =============

	def _on_sign_in(self):
		user_id, ok = QInputDialog.getText(self, "Sign in", "User id:")
		if ok and user_id.strip():
			self.set_logged_in_user({'id': user_id.strip()})
