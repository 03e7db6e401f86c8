import sys
import os
import logging

# Configure logging
logging.basicConfig(
    level=logging.WARNING,  # Only show warnings and errors
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # Output to console
    ]
)

# Add collage_editor/src to path so imports work when running directly
if __name__ == "__main__":
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

# PyQt5 import/s
from PyQt5.QtWidgets import QMainWindow, QApplication, QMessageBox
from PyQt5.QtCore import QTimer

from constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME
from services.api_client import ApiClient
from services.editor_controller import EditorController
from utils.errors import ApiError
from utils.logger import set_main_window, show_alert

# Mixin imports
from window.config_mixin import ConfigMixin
from window.actions_mixin import ActionsMixin
from window.ui_setup_mixin import UISetupMixin

logger = logging.getLogger(__name__)


class CollageEditor(ConfigMixin, ActionsMixin, UISetupMixin, QMainWindow):
    def __init__(self, config_dir=None):
        super().__init__()
        self.setWindowTitle("Collage Editor")
        self.resize(1100, 760)

        self.config_dir = config_dir or os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)
        self.config_file = os.path.join(self.config_dir, CONFIG_FILE_NAME)
        self._load_config()

        # Controller is the single owner of document and session state
        self.controller = EditorController(api=ApiClient(self.api_base_url), parent=self)
        if self.saved_user:
            self.controller.login(self.saved_user)

        # Initialize global logger with main window reference
        set_main_window(self)

        self.setup_ui()

        # Fetch the asset libraries once the window is up
        QTimer.singleShot(0, self._load_assets)

    def _load_assets(self):
        try:
            self.controller.load_assets()
        except ApiError as e:
            logger.error("Failed to load assets: %s", e)
            show_alert("Failed to load the image libraries.")

    # ============= Auth bridge =============

    def set_logged_in_user(self, user):
        self.controller.login(user)
        self._save_config()
        self._update_login_ui()

    def set_logged_out(self):
        self.controller.logout()
        self._save_config()
        self._update_login_ui()

    def closeEvent(self, event):
        """Confirm before discarding a collage that was never saved"""
        if self.controller.has_unsaved_work:
            reply = QMessageBox.question(
                self, "Unsaved collage",
                "You haven't saved or published this collage. Quit anyway?",
                QMessageBox.Yes | QMessageBox.No, QMessageBox.No,
            )
            if reply != QMessageBox.Yes:
                event.ignore()
                return
        event.accept()


def main():
    app = QApplication(sys.argv)
    window = CollageEditor()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
