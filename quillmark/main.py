import logging
import sys
from typing import List, Optional

from PyQt5.QtWidgets import QApplication

from quillmark.ui import MainWindow
from quillmark.utils import load_settings, setup_logging

log = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the editor. An optional PDF path may be passed as the first argument.
    """
    argv = sys.argv if argv is None else argv
    setup_logging()

    app = QApplication(argv)
    app.setApplicationName("Quillmark PDF")

    file_path = argv[1] if len(argv) > 1 else None
    log.info("Starting Quillmark PDF")

    window = MainWindow(load_settings(), file_path)
    window.showMaximized()
    return app.exec_()


if __name__ == '__main__':
    sys.exit(main())
