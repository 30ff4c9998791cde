import sys

from PySide6.QtWidgets import QApplication

from pkgcenter.logging import init_logger
from pkgcenter.presentation.main_window import MainWindow


def main() -> int:
    logger = init_logger()

    app = QApplication(sys.argv)
    app.setApplicationName("pkgcenter")

    window = MainWindow()
    window.show()

    if not window.prompt_for_sudo_password():
        logger.warning("No sudo password entered, exiting")
        return 1

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
