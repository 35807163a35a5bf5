import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.config import load_config
from core.logging_setup import configure_logging
from core.state import AppState
from ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def init_app_state() -> AppState:
    config = load_config()
    app_state = AppState(config=config)
    logger.info("Catalog: %s, downloads: %s", config.catalog_path, config.download_dir)
    return app_state


def main() -> int:
    configure_logging()

    qt_app = QApplication(sys.argv)
    qt_app.setOrganizationName("MezmurHub")
    qt_app.setApplicationName("Mezmur Hub")

    app_state = init_app_state()
    qt_app.aboutToQuit.connect(app_state.shutdown)

    main_window = MainWindow(app_state)
    main_window.show()

    return qt_app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
