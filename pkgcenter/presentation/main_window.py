from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QHeaderView,
    QInputDialog,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from pkgcenter.application.pkg_controller import PkgController
from pkgcenter.core.package_types import PackageRecord
from pkgcenter.presentation.table_models import PackageTableModel

_READY_MESSAGE = "Ready. Enter a search term."


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self) -> None:
        super().__init__()
        self._busy = False
        self.setWindowTitle("yay Package Center")

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search packages (via yay -Ss)...")
        self.search_button = QPushButton("Search")

        search_row = QHBoxLayout()
        search_row.addWidget(self.search_edit, 1)
        search_row.addWidget(self.search_button)

        self.model = PackageTableModel(self)
        self.table = QTableView()
        self.table.setModel(self.model)
        self._polish_table()

        self.log_view = QPlainTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setUndoRedoEnabled(False)
        self.log_view.setMaximumBlockCount(4000)

        splitter = QSplitter(Qt.Orientation.Vertical)
        splitter.addWidget(self.table)
        splitter.addWidget(self.log_view)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)

        self.action_button = QPushButton("Install")
        self.action_button.setEnabled(False)
        self.clean_button = QPushButton("Clean Orphans")

        action_row = QHBoxLayout()
        action_row.addStretch(1)
        action_row.addWidget(self.action_button)
        action_row.addWidget(self.clean_button)

        root = QVBoxLayout()
        root.addLayout(search_row)
        root.addWidget(splitter, 1)
        root.addLayout(action_row)
        central = QWidget()
        central.setLayout(root)
        self.setCentralWidget(central)

        # ---- Controller + wiring
        self.controller = PkgController(self)
        self.controller.log.connect(self.log_view.appendPlainText)
        self.controller.error.connect(self.log_view.appendPlainText)
        self.controller.searched.connect(self.on_search_loaded)
        self.controller.busy_changed.connect(self.on_busy_changed)
        self.controller.job_started.connect(self.on_job_started)
        self.controller.job_finished.connect(self.on_job_finished)

        self.search_edit.returnPressed.connect(self.on_search_clicked)
        self.search_button.clicked.connect(self.on_search_clicked)
        self.action_button.clicked.connect(self.on_action_clicked)
        self.clean_button.clicked.connect(self.on_clean_clicked)
        self.table.selectionModel().currentChanged.connect(
            lambda _current, _previous: self._sync_action_button()
        )
        self.table.doubleClicked.connect(lambda _idx: self.on_action_clicked())

        self.statusBar().showMessage(_READY_MESSAGE)

    def _polish_table(self) -> None:
        """Applies initial settings to the results table."""
        tv = self.table
        tv.verticalHeader().setVisible(False)

        hh = tv.horizontalHeader()
        hh.setStretchLastSection(True)
        hh.setSectionResizeMode(0, QHeaderView.ResizeMode.Interactive)
        hh.setSectionResizeMode(1, QHeaderView.ResizeMode.Interactive)
        hh.setSectionResizeMode(2, QHeaderView.ResizeMode.Interactive)
        hh.setSectionResizeMode(3, QHeaderView.ResizeMode.ResizeToContents)

        tv.setWordWrap(False)
        tv.setAlternatingRowColors(True)
        tv.setShowGrid(False)
        # yay's own ordering (exact matches first) is kept; no column sorting.
        tv.setSortingEnabled(False)
        tv.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        tv.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        tv.setColumnWidth(0, 220)
        tv.setColumnWidth(1, 120)
        tv.setColumnWidth(2, 90)

    def prompt_for_sudo_password(self) -> bool:
        """Asks once for the sudo password used for this session.

        Returns:
            True if a non-empty password was entered.
        """
        password, ok = QInputDialog.getText(
            self,
            "Authentication Required",
            "Please enter your sudo password.\n"
            "This will be used for installs, removals, and cleanup during this session.",
            QLineEdit.EchoMode.Password,
        )
        if ok and password:
            self.controller.set_sudo_password(password)
            return True
        return False

    def _confirm(self, text: str) -> bool:
        answer = QMessageBox.question(
            self,
            "Confirm",
            text,
            QMessageBox.StandardButton.Ok | QMessageBox.StandardButton.Cancel,
        )
        return answer == QMessageBox.StandardButton.Ok

    def _selected_record(self) -> PackageRecord | None:
        current = self.table.currentIndex()
        if not current.isValid():
            return None
        return self.model.record_at(current.row())

    def _sync_action_button(self) -> None:
        record = self._selected_record()
        if record is None:
            self.action_button.setText("Install")
            self.action_button.setEnabled(False)
            return
        self.action_button.setText("Remove" if record.installed else "Install")
        self.action_button.setEnabled(not self._busy)

    def on_search_clicked(self) -> None:
        query = self.search_edit.text().strip()
        if not query:
            self.model.set_records([])
            self.statusBar().showMessage(_READY_MESSAGE)
            self._sync_action_button()
            return
        self.statusBar().showMessage(f"Searching for {query}...")
        self.controller.search_packages(query)

    def on_search_loaded(self, records_obj: object) -> None:
        records = records_obj if isinstance(records_obj, list) else []
        self.model.set_records([r for r in records if isinstance(r, PackageRecord)])

        if self.model.rowCount() > 0:
            self.table.setCurrentIndex(self.model.index(0, 0))
            self.statusBar().showMessage(
                f"Results: {self.model.rowCount()}  | "
                f"Installed: {self.model.installed_count()} (already on system)"
            )
        elif self.controller.last_query:
            self.statusBar().showMessage("No results found.")
        else:
            self.statusBar().showMessage(_READY_MESSAGE)
        self._sync_action_button()

    def on_action_clicked(self) -> None:
        record = self._selected_record()
        if record is None or self._busy:
            return

        if record.installed:
            if self._confirm(
                f'Remove package "{record.name}"?\n\n'
                "This will also remove unused dependencies."
            ):
                self.controller.remove_package(record.name)
            return

        if self._confirm(f'Install package "{record.name}" using yay?'):
            self.controller.install_package(record.name)

    def on_clean_clicked(self) -> None:
        if self._confirm(
            "Clean up orphaned packages?\n\n"
            'This runs "yay -Yc --noconfirm" to remove unused dependencies.'
        ):
            self.controller.clean_orphans()

    # ---- Busy/state
    def on_busy_changed(self, busy: bool) -> None:
        self._busy = busy
        self.search_button.setEnabled(not busy)
        self.clean_button.setEnabled(not busy)
        self._sync_action_button()

    def on_job_started(self, label: str) -> None:
        self.statusBar().showMessage(f"Running: {label}")

    def on_job_finished(self, label: str, ok: bool) -> None:
        if label.startswith("yay -Ss "):
            return
        if ok:
            QMessageBox.information(self, "Done", f"{label} finished.")
        else:
            QMessageBox.critical(
                self,
                "Failed",
                f"{label} may have failed.\nCheck the log or run yay manually.",
            )
