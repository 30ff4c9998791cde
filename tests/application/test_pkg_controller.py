import pytest

from pkgcenter.application import pkg_controller
from pkgcenter.application.package_service import Session
from pkgcenter.application.pkg_controller import PkgController
from pkgcenter.core.package_types import PackageRecord


class _FakeSignal:
    def __init__(self) -> None:
        self.slots: list = []

    def connect(self, slot) -> None:
        self.slots.append(slot)


class _FakeThread:
    def __init__(self) -> None:
        self.started = _FakeSignal()
        self.finished = _FakeSignal()
        self.start_calls = 0

    def start(self) -> None:
        self.start_calls += 1

    def quit(self) -> None:
        pass

    def deleteLater(self) -> None:
        pass


class _FakeWorker:
    def __init__(self, job, job_id: int) -> None:
        self.job = job
        self.job_id = job_id
        self.output = _FakeSignal()
        self.finished = _FakeSignal()

    def moveToThread(self, thread) -> None:
        self.thread = thread

    def run(self) -> None:
        pass

    def deleteLater(self) -> None:
        pass


@pytest.fixture
def threads(monkeypatch) -> list[_FakeThread]:
    """Replaces QThread/JobWorker so jobs are scheduled but never run."""
    created: list[_FakeThread] = []

    def _make_thread() -> _FakeThread:
        thread = _FakeThread()
        created.append(thread)
        return thread

    monkeypatch.setattr(pkg_controller, "QThread", _make_thread)
    monkeypatch.setattr(pkg_controller, "JobWorker", _FakeWorker)
    return created


def _finish(controller: PkgController, thread: _FakeThread, result: object) -> None:
    controller._on_worker_finished(controller._active_job_id, result)
    for slot in thread.finished.slots:
        slot()


def _capture(controller: PkgController) -> dict[str, list]:
    captured: dict[str, list] = {
        "log": [],
        "error": [],
        "searched": [],
        "job_finished": [],
        "busy": [],
        "job_started": [],
    }
    controller.log.connect(lambda text: captured["log"].append(text))
    controller.error.connect(lambda text: captured["error"].append(text))
    controller.searched.connect(lambda rows: captured["searched"].append(rows))
    controller.job_finished.connect(
        lambda label, ok: captured["job_finished"].append((label, ok))
    )
    controller.busy_changed.connect(lambda busy: captured["busy"].append(busy))
    controller.job_started.connect(lambda label: captured["job_started"].append(label))
    return captured


def test_blank_search_emits_empty_results_without_starting_a_job() -> None:
    controller = PkgController()
    captured = _capture(controller)

    controller.search_packages("   ")

    assert captured["searched"] == [[]]
    assert controller.is_busy() is False
    assert controller.last_query == ""


def test_privileged_operations_require_cached_password() -> None:
    controller = PkgController(session=Session(""))
    captured = _capture(controller)

    controller.install_package("vim")
    controller.remove_package("vim")
    controller.clean_orphans()

    assert len(captured["error"]) == 3
    assert all("No sudo password cached" in msg for msg in captured["error"])
    assert controller.is_busy() is False


def test_set_sudo_password_updates_session() -> None:
    session = Session()
    controller = PkgController(session=session)

    controller.set_sudo_password("pw")

    assert session.sudo_password == "pw"
    assert controller.has_credentials() is True


def test_worker_output_is_scrubbed_before_logging() -> None:
    controller = PkgController()
    captured = _capture(controller)

    controller._on_worker_output(b"\x1b[1;34m::\x1b[0m Searching AUR...\r\n")
    controller._on_worker_output(b"\x1b[0m\n")

    assert captured["log"] == [":: Searching AUR..."]


def test_stale_job_results_are_ignored() -> None:
    controller = PkgController()
    results: list[object] = []
    controller._active_job_id = 2
    controller._on_active_finished = results.append

    controller._on_worker_finished(1, ["stale"])
    controller._on_worker_finished(2, ["fresh"])

    assert results == [["fresh"]]


def test_search_finished_emits_records_and_summary() -> None:
    controller = PkgController()
    captured = _capture(controller)
    controller._active_label = "yay -Ss vim"
    records = [
        PackageRecord("extra", "vim", "9.1-1", "editor", installed=True),
        PackageRecord("aur", "vim-git", "9.1.0-1", "editor (git)"),
    ]

    controller._on_search_finished(records)

    assert captured["searched"] == [records]
    assert captured["log"] == ["[search] 2 results, 1 installed"]
    assert captured["job_finished"] == [("yay -Ss vim", True)]


def test_search_job_crash_reports_failure_and_no_results() -> None:
    controller = PkgController()
    captured = _capture(controller)
    controller._active_label = "yay -Ss vim"

    controller._on_search_finished(None)

    assert captured["searched"] == [[]]
    assert captured["error"] == ["[error] yay -Ss vim failed"]
    assert captured["job_finished"] == [("yay -Ss vim", False)]


def test_command_finished_schedules_search_even_on_failure() -> None:
    controller = PkgController()
    captured = _capture(controller)
    controller._active_label = "yay -S vim"

    controller._on_command_finished(False, search_after=True)

    assert captured["error"] == ["[error] yay -S vim failed"]
    assert captured["job_finished"] == [("yay -S vim", False)]
    assert controller._search_after_finish is True


def test_command_finished_success_without_follow_up_search() -> None:
    controller = PkgController()
    captured = _capture(controller)
    controller._active_label = "yay -Yc"

    controller._on_command_finished(True, search_after=False)

    assert captured["error"] == []
    assert captured["job_finished"] == [("yay -Yc", True)]
    assert controller._search_after_finish is False


def test_search_starts_job_and_remembers_query(threads) -> None:
    controller = PkgController()
    captured = _capture(controller)

    controller.search_packages("  vim ")

    assert len(threads) == 1
    assert threads[0].start_calls == 1
    assert controller.is_busy() is True
    assert controller.last_query == "vim"
    assert captured["job_started"] == ["yay -Ss vim"]
    assert captured["log"] == ["$ yay -Ss vim", "[running] ..."]
    assert captured["busy"] == [True]


def test_search_while_busy_is_refused_and_keeps_last_query(threads) -> None:
    controller = PkgController(session=Session("pw"))
    controller.search_packages("vim")
    captured = _capture(controller)

    controller.search_packages("emacs")
    controller.install_package("emacs")

    assert len(threads) == 1
    assert captured["log"] == ["[info] already running", "[info] already running"]
    assert captured["job_started"] == []
    assert captured["busy"] == []
    assert controller.last_query == "vim"


def test_finished_search_drops_busy_state(threads) -> None:
    controller = PkgController()
    controller.search_packages("vim")
    captured = _capture(controller)

    _finish(controller, threads[0], [PackageRecord("extra", "vim", "9.1-1")])

    assert captured["searched"] == [[PackageRecord("extra", "vim", "9.1-1")]]
    assert captured["busy"] == [False]
    assert controller.is_busy() is False


def test_install_chains_search_without_dropping_busy_state(threads) -> None:
    controller = PkgController(session=Session("pw"))
    controller.search_packages("vim")
    _finish(controller, threads[0], [])
    captured = _capture(controller)

    controller.install_package("vim")
    _finish(controller, threads[1], False)

    assert len(threads) == 3
    assert threads[2].start_calls == 1
    assert captured["job_started"] == ["yay -S vim", "yay -Ss vim"]
    assert captured["job_finished"] == [("yay -S vim", False)]
    assert captured["busy"] == [True, True]
    assert controller.is_busy() is True
    assert controller.last_query == "vim"


def test_install_without_previous_query_does_not_chain_search(threads) -> None:
    controller = PkgController(session=Session("pw"))
    captured = _capture(controller)

    controller.install_package("vim")
    _finish(controller, threads[0], True)

    assert len(threads) == 1
    assert captured["job_finished"] == [("yay -S vim", True)]
    assert captured["busy"] == [True, False]


def test_clean_orphans_never_chains_search(threads) -> None:
    controller = PkgController(session=Session("pw"))
    controller.search_packages("vim")
    _finish(controller, threads[0], [])
    captured = _capture(controller)

    controller.clean_orphans()
    _finish(controller, threads[1], True)

    assert len(threads) == 2
    assert captured["busy"] == [True, False]


def test_finish_of_replaced_thread_is_ignored(threads) -> None:
    controller = PkgController()
    controller.search_packages("vim")
    captured = _capture(controller)

    controller._on_thread_finished(_FakeThread())

    assert controller.is_busy() is True
    assert captured["busy"] == []
