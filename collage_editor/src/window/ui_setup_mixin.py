"""UI setup for CollageEditor"""

from PyQt5.QtWidgets import (
	QWidget, QHBoxLayout, QVBoxLayout, QGroupBox, QPushButton, QLabel, QSlider, QStatusBar,
)
from PyQt5.QtCore import Qt

from components.collage_canvas import CollageCanvas
from constants import SCALE_MIN, SCALE_MAX


class UISetupMixin:
	"""UI initialization and component wiring"""

	def setup_ui(self):
		"""Initialize and wire up all UI components"""
		self._create_menu_bar()

		central_widget = QWidget()
		self.setCentralWidget(central_widget)

		main_layout = QHBoxLayout(central_widget)
		main_layout.setContentsMargins(8, 8, 8, 8)

		main_layout.addWidget(self._create_create_panel())

		# Center: canvas plus the finish row underneath
		center = QWidget()
		center_layout = QVBoxLayout(center)
		center_layout.setContentsMargins(0, 0, 0, 0)
		self.canvas = CollageCanvas(self.controller)
		self.canvas.textEditRequested.connect(self._on_edit_text_requested)
		center_layout.addWidget(self.canvas, 1)
		center_layout.addWidget(self._create_finish_row())
		main_layout.addWidget(center, 1)

		main_layout.addWidget(self._create_layer_panel())

		# Status bar with sign-in hint
		self.setStatusBar(QStatusBar())
		self.login_hint = QLabel()
		self.statusBar().addPermanentWidget(self.login_hint)

		self.controller.selection_changed.connect(lambda _id: self._update_layer_selection_ui())
		self.controller.layer_changed.connect(lambda _layer: self._update_layer_selection_ui())
		self.controller.document_changed.connect(self._update_layer_selection_ui)

		self._update_layer_selection_ui()
		self._update_login_ui()

	def _create_menu_bar(self):
		menu_bar = self.menuBar()

		file_menu = menu_bar.addMenu("&File")
		file_menu.addAction("Export PNG...", self._on_export_png)
		file_menu.addSeparator()
		file_menu.addAction("Clear canvas", self._on_clear)
		file_menu.addSeparator()
		file_menu.addAction("Exit", self.close)

		account_menu = menu_bar.addMenu("&Account")
		self.sign_in_action = account_menu.addAction("Sign in...", self._on_sign_in)
		self.sign_out_action = account_menu.addAction("Sign out", self.set_logged_out)

	def _create_create_panel(self):
		"""Left column: ways to add content"""
		self.create_actions = QGroupBox("Create")
		layout = QVBoxLayout(self.create_actions)

		for text, slot in (
			("From gallery...", self._on_add_from_gallery),
			("App images...", self._on_add_app_images),
			("Background...", self._on_choose_background),
			("Add text", self._on_add_text),
		):
			button = QPushButton(text)
			button.clicked.connect(slot)
			layout.addWidget(button)

		layout.addStretch()
		return self.create_actions

	def _create_layer_panel(self):
		"""Right column: tools for the selected layer"""
		self.layer_tools = QGroupBox("Layer")
		layout = QVBoxLayout(self.layer_tools)

		self.layer_selected_label = QLabel("None")
		layout.addWidget(self.layer_selected_label)

		layout.addWidget(QLabel("Scale"))
		self.scale_slider = QSlider(Qt.Horizontal)
		self.scale_slider.setRange(int(SCALE_MIN * 100), int(SCALE_MAX * 100))
		self.scale_slider.valueChanged.connect(self._on_scale_slider)
		layout.addWidget(self.scale_slider)

		layout.addWidget(QLabel("Rotate"))
		self.rotate_slider = QSlider(Qt.Horizontal)
		self.rotate_slider.setRange(-180, 180)
		self.rotate_slider.valueChanged.connect(self._on_rotate_slider)
		layout.addWidget(self.rotate_slider)

		for text, slot in (
			("Bring to front", self._on_bring_to_front),
			("Send to back", self._on_send_to_back),
			("Delete", self._on_delete_layer),
		):
			button = QPushButton(text)
			button.clicked.connect(slot)
			layout.addWidget(button)

		self.remove_bg_button = QPushButton("Remove background")
		self.remove_bg_button.clicked.connect(self._on_remove_background)
		layout.addWidget(self.remove_bg_button)

		# Text tools, only shown for text layers
		self.text_tools = QGroupBox("Text")
		text_layout = QVBoxLayout(self.text_tools)
		for text, slot in (
			("Edit text...", self._on_edit_text),
			("Font...", self._on_choose_font),
			("Color...", self._on_choose_color),
		):
			button = QPushButton(text)
			button.clicked.connect(slot)
			text_layout.addWidget(button)
		layout.addWidget(self.text_tools)

		layout.addStretch()
		return self.layer_tools

	def _create_finish_row(self):
		row = QWidget()
		layout = QHBoxLayout(row)
		layout.setContentsMargins(0, 0, 0, 0)

		self.clear_button = QPushButton("Clear")
		self.clear_button.clicked.connect(self._on_clear)
		layout.addWidget(self.clear_button)

		layout.addStretch()

		self.done_button = QPushButton("Done")
		self.done_button.clicked.connect(self._on_done)
		layout.addWidget(self.done_button)

		self.create_more_button = QPushButton("Create more")
		self.create_more_button.clicked.connect(self._on_create_more)
		self.create_more_button.setVisible(False)
		layout.addWidget(self.create_more_button)

		return row

	def _set_editing_visible(self, visible):
		"""Show the editing tools, or hide them while the collage is final"""
		self.create_actions.setVisible(visible)
		self.layer_tools.setVisible(visible)
		self.clear_button.setVisible(visible)
		self.done_button.setVisible(visible)
		self.create_more_button.setVisible(not visible)

	def _update_layer_selection_ui(self):
		"""Sync the layer panel with the selected layer"""
		layer = self.controller.document.selected_layer

		for slider in (self.scale_slider, self.rotate_slider):
			slider.blockSignals(True)
		try:
			if layer is None:
				self.layer_selected_label.setText("None")
				self.scale_slider.setValue(100)
				self.rotate_slider.setValue(0)
				self.text_tools.setVisible(False)
				self.remove_bg_button.setEnabled(False)
				return

			self.layer_selected_label.setText(layer.label)
			self.scale_slider.setValue(round(layer.scale * 100))
			# Slider shows the wrapped angle; the layer keeps the unbounded one
			self.rotate_slider.setValue(round((layer.rotation + 180) % 360 - 180))
			is_text = self.controller.selected_text_layer() is not None
			self.text_tools.setVisible(is_text)
			self.remove_bg_button.setEnabled(not is_text)
		finally:
			for slider in (self.scale_slider, self.rotate_slider):
				slider.blockSignals(False)

	def _update_login_ui(self):
		logged_in = self.controller.is_logged_in
		self.sign_in_action.setEnabled(not logged_in)
		self.sign_out_action.setEnabled(logged_in)
		if logged_in:
			self.login_hint.setText(f"Signed in as {self.controller.current_user_id}")
		else:
			self.login_hint.setText("Sign in to save or publish your collage")
