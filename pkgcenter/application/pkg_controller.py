from typing import Callable

from PySide6.QtCore import QObject, QThread, Signal, Slot

from pkgcenter.application import package_service
from pkgcenter.application.package_service import Session
from pkgcenter.core.ansi import scrub
from pkgcenter.core.package_types import PackageRecord
from pkgcenter.infra.qt_worker import Job, JobWorker


class PkgController(QObject):
    """Orchestrates yay commands and exposes results via Qt signals."""

    log = Signal(str)
    error = Signal(str)
    searched = Signal(object)  # list[PackageRecord]
    busy_changed = Signal(bool)
    job_started = Signal(str)
    job_finished = Signal(str, bool)  # label, ok

    def __init__(self, parent: QObject | None = None, session: Session | None = None):
        """Initializes the controller.

        Args:
            parent: Optional Qt parent object.
            session: Session holding the sudo password. A fresh one by default.
        """
        super().__init__(parent)
        self._session = session or Session()
        self._thread: QThread | None = None
        self._worker: JobWorker | None = None
        self._active_job_id = 0
        self._active_label = ""
        self._on_active_finished: Callable[[object], None] | None = None
        self._last_query = ""
        self._search_after_finish = False

    def is_busy(self) -> bool:
        return self._thread is not None

    def has_credentials(self) -> bool:
        return self._session.has_credentials()

    def set_sudo_password(self, password: str) -> None:
        self._session.sudo_password = password

    @property
    def last_query(self) -> str:
        return self._last_query

    def search_packages(self, query: str) -> None:
        """Searches packages via `yay -Ss` in the background."""
        q = query.strip()
        if not q:
            self._last_query = ""
            self.searched.emit([])
            return

        started = self._start_job(
            label=f"yay -Ss {q}",
            job=lambda on_chunk: package_service.search_packages(q, on_chunk),
            on_finished=self._on_search_finished,
        )
        if started:
            self._last_query = q

    def install_package(self, name: str) -> None:
        """Installs the specified package, then repeats the last search."""
        if not self._require_credentials():
            return
        session = self._session
        self._run_privileged(
            label=f"yay -S {name}",
            job=lambda on_chunk: package_service.install_package(
                session, name, on_chunk
            ),
            search_after=True,
        )

    def remove_package(self, name: str) -> None:
        """Removes the specified package, then repeats the last search."""
        if not self._require_credentials():
            return
        session = self._session
        self._run_privileged(
            label=f"yay -Rns {name}",
            job=lambda on_chunk: package_service.remove_package(
                session, name, on_chunk
            ),
            search_after=True,
        )

    def clean_orphans(self) -> None:
        """Removes orphaned packages via `yay -Yc`."""
        if not self._require_credentials():
            return
        session = self._session
        self._run_privileged(
            label="yay -Yc",
            job=lambda on_chunk: package_service.clean_orphans(session, on_chunk),
            search_after=False,
        )

    def _require_credentials(self) -> bool:
        if self._session.has_credentials():
            return True
        self.error.emit("[error] No sudo password cached. Please restart the app.")
        return False

    def _on_thread_finished(self, finished_thread: QThread) -> None:
        """Clears references only if the finished thread is still the active one.

        Args:
            finished_thread: The thread that has emitted `finished`.
        """
        if self._thread is finished_thread:
            self._thread = None
            self._worker = None
            if self._search_after_finish:
                self._search_after_finish = False
                if self._last_query:
                    # Chain the search without dropping the busy state in-between.
                    self.search_packages(self._last_query)
                    return
            self.busy_changed.emit(False)

    def _start_job(
        self,
        label: str,
        job: Job,
        on_finished: Callable[[object], None],
        announce: bool = True,
    ) -> bool:
        if self._thread is not None:
            self.log.emit("[info] already running")
            return False

        self._active_job_id += 1
        job_id = self._active_job_id
        self._active_label = label
        self._on_active_finished = on_finished
        self._search_after_finish = False

        if announce:
            self.log.emit(f"$ {label}")
            self.log.emit("[running] ...")

        self.job_started.emit(label)
        self.busy_changed.emit(True)

        thread = QThread()
        worker = JobWorker(job=job, job_id=job_id)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)

        worker.output.connect(self._on_worker_output)
        worker.finished.connect(self._on_worker_finished)
        worker.finished.connect(thread.quit)
        worker.finished.connect(worker.deleteLater)
        thread.finished.connect(thread.deleteLater)
        thread.finished.connect(lambda t=thread: self._on_thread_finished(t))

        self._thread = thread
        self._worker = worker
        thread.start()
        return True

    def _run_privileged(self, label: str, job: Job, search_after: bool) -> None:
        self._start_job(
            label=label,
            job=job,
            on_finished=lambda result, sa=search_after: self._on_command_finished(
                result, sa
            ),
        )

    @staticmethod
    def _decode(data: bytes) -> str:
        return data.decode("utf-8", errors="replace")

    @Slot(bytes)
    def _on_worker_output(self, chunk: bytes) -> None:
        """Forwards streamed process output to the log, without escapes."""
        text = scrub(self._decode(chunk)).replace("\r", "").rstrip("\n")
        if text.strip():
            self.log.emit(text)

    @Slot(int, object)
    def _on_worker_finished(self, job_id: int, result: object) -> None:
        """Dispatches a job result, ignoring results of stale jobs.

        Args:
            job_id: Monotonic identifier of the finished job.
            result: Return value of the job, or None if it raised.
        """
        if job_id != self._active_job_id or self._on_active_finished is None:
            return
        self._on_active_finished(result)

    def _on_search_finished(self, result: object) -> None:
        raw = result if isinstance(result, list) else []
        records = [r for r in raw if isinstance(r, PackageRecord)]

        if result is None:
            self.error.emit(f"[error] {self._active_label} failed")
        installed = sum(1 for r in records if r.installed)
        self.log.emit(f"[search] {len(records)} results, {installed} installed")

        self.searched.emit(records)
        self.job_finished.emit(self._active_label, result is not None)

    def _on_command_finished(self, result: object, search_after: bool) -> None:
        ok = result is True
        if not ok:
            self.error.emit(f"[error] {self._active_label} failed")
        # Re-run the search either way so the Install/Remove state is current.
        self._search_after_finish = search_after

        self.job_finished.emit(self._active_label, ok)
