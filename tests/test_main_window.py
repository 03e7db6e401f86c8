"""
Smoke tests for the assembled main window: config persistence, sign-in
state and the layer panel following the selection.
"""
import json

import pytest

from PyQt5.QtWidgets import QMessageBox

from constants import DEFAULT_API_BASE_URL
from services.api_client import ApiClient, AssetCatalog
from utils.logger import set_main_window


@pytest.fixture
def window(qtbot, tmp_path, monkeypatch):
    monkeypatch.setattr(ApiClient, 'get_assets', lambda self: AssetCatalog())
    from main import CollageEditor
    widget = CollageEditor(config_dir=str(tmp_path))
    qtbot.addWidget(widget)
    yield widget
    # Closing with unsaved work would ask for confirmation
    widget.controller.document.clear()
    # Later tests must not pop modal alerts
    set_main_window(None)


class TestMainWindow:

    def test_starts_logged_out(self, window):
        assert not window.controller.is_logged_in
        assert window.sign_in_action.isEnabled()
        assert not window.sign_out_action.isEnabled()

    def test_sign_in_persists_user(self, window):
        window.set_logged_in_user({'id': 'u1'})
        assert window.sign_out_action.isEnabled()
        with open(window.config_file, encoding='utf-8') as f:
            assert json.load(f)['user'] == {'id': 'u1'}

    def test_saved_user_restored(self, qtbot, tmp_path, monkeypatch):
        monkeypatch.setattr(ApiClient, 'get_assets', lambda self: AssetCatalog())
        (tmp_path / 'config.json').write_text(json.dumps({'user': {'id': 'u9'}}))
        from main import CollageEditor
        widget = CollageEditor(config_dir=str(tmp_path))
        qtbot.addWidget(widget)
        try:
            assert widget.controller.current_user_id == 'u9'
        finally:
            set_main_window(None)

    def test_sign_out_forgets_user(self, window):
        window.set_logged_in_user({'id': 'u1'})
        window.set_logged_out()
        with open(window.config_file, encoding='utf-8') as f:
            assert json.load(f)['user'] is None

    def test_text_tools_follow_selection(self, window):
        window.controller.add_text_layer()
        assert not window.text_tools.isHidden()
        assert not window.remove_bg_button.isEnabled()
        window.controller.set_selected_layer(None)
        assert window.text_tools.isHidden()
        assert window.layer_selected_label.text() == "None"

    def test_scale_slider_drives_selected_layer(self, window):
        layer = window.controller.create_layer('a.png')
        window.controller.set_selected_layer(layer.id)
        window.scale_slider.setValue(250)
        assert layer.scale == pytest.approx(2.5)

    def test_slider_without_selection_is_silent(self, window):
        window.scale_slider.setValue(300)
        assert window.controller.document.layers == []


# ══════════════════════════════════════════════════════════════════════════
# Broken config files
# ══════════════════════════════════════════════════════════════════════════

class TestConfigFailures:

    @pytest.fixture
    def popups(self, monkeypatch):
        """Record error popups instead of blocking on them"""
        shown = []
        monkeypatch.setattr(QMessageBox, 'critical', lambda *args: shown.append(args))
        monkeypatch.setattr(ApiClient, 'get_assets', lambda self: AssetCatalog())
        return shown

    def _open(self, qtbot, config_dir):
        from main import CollageEditor
        widget = CollageEditor(config_dir=str(config_dir))
        qtbot.addWidget(widget)
        return widget

    @pytest.mark.parametrize("contents", ['{not json', '[1, 2, 3]', '"just a string"'])
    def test_unreadable_config_starts_with_defaults(self, qtbot, tmp_path, popups, contents):
        (tmp_path / 'config.json').write_text(contents)
        try:
            widget = self._open(qtbot, tmp_path)
            assert widget.api_base_url == DEFAULT_API_BASE_URL
            assert widget.saved_user is None
            assert not widget.controller.is_logged_in
        finally:
            set_main_window(None)

    def test_unwritable_config_keeps_sign_in(self, qtbot, tmp_path, popups):
        # A file where the config directory should be makes every save fail
        blocker = tmp_path / 'blocker'
        blocker.write_text('')
        try:
            widget = self._open(qtbot, blocker)
            widget.set_logged_in_user({'id': 'u1'})
            assert widget.controller.current_user_id == 'u1'
            assert widget.sign_out_action.isEnabled()
            assert len(popups) == 1
            widget.set_logged_out()
            assert not widget.controller.is_logged_in
        finally:
            set_main_window(None)
