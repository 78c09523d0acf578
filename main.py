import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from pyoracle.settings_manager import SettingsManager
from pyoracle.ui.oracle_window import OracleWindow


def _split_startup_args(argv: list[str]) -> tuple[list[str], list[str]]:
    files: list[str] = []
    qt_args: list[str] = []
    for arg in argv:
        if arg.startswith("-"):
            qt_args.append(arg)
            continue
        files.append(arg)
    return files, qt_args


def _existing_files(paths: list[str]) -> list[str]:
    out: list[str] = []
    for raw in paths:
        candidate = Path(str(raw or "").strip()).expanduser()
        if candidate.is_file():
            out.append(str(candidate.resolve()))
    return out


def main() -> int:
    cli_files, qt_args = _split_startup_args(sys.argv[1:])

    app = QApplication([sys.argv[0], *qt_args])
    app.setStyle("Fusion")
    app.setApplicationName(OracleWindow.APP_NAME)

    manager = SettingsManager()
    window = OracleWindow(settings_manager=manager)
    for file_path in _existing_files(cli_files):
        window.open_file(file_path)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
