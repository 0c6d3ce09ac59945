"""Tests for run reports, console summaries and the publish log."""

import io

from loguru import logger
from rich.console import Console

from qopublish.publisher import print_status, print_summary
from qopublish.types import BatchReport, BatchState, FileRecord, FileState
from qopublish.util import (
    TEST_LOGLEVEL,
    clear_log,
    get_log_filename,
    load_report,
    save_report,
    shutdown_publish_log,
    start_publish_log,
)


def make_report():
    return BatchReport(
        state=BatchState.ABORTED,
        records=[
            FileRecord(name="spin.ipynb", state=FileState.MARKDOWN_CONVERTED, duration=2.5),
            FileRecord(name="fock.ipynb", state=FileState.SKIPPED),
            FileRecord(
                name="bad.ipynb",
                state=FileState.FAILED,
                error="Converter exited with status 1 for bad.ipynb",
            ),
        ],
        started="2024-05-01T10:00:00",
        error="Converter exited with status 1 for bad.ipynb",
    )


def render(func, *args):
    buf = io.StringIO()
    func(*args, console=Console(file=buf, width=120, color_system=None))
    return buf.getvalue()


def test_report_record_and_counts():
    report = BatchReport()
    rec = report.record("a.ipynb")
    assert report.record("a.ipynb") is rec
    assert rec.state == FileState.PENDING

    counts = make_report().counts()
    assert counts[FileState.MARKDOWN_CONVERTED] == 1
    assert counts[FileState.SKIPPED] == 1
    assert counts[FileState.FAILED] == 1
    assert counts[FileState.PENDING] == 0


def test_finished_states():
    assert FileState.MARKDOWN_CONVERTED.finished
    assert FileState.SKIPPED.finished
    assert not FileState.SCRIPT_CONVERTED.finished
    assert not FileState.FAILED.finished


def test_save_and_load_report(tmp_path):
    report = make_report()
    path = save_report(report, tmp_path / "out" / "report.json")
    assert path.exists()
    assert '"state": "aborted"' in path.read_text()

    loaded = load_report(path)
    assert loaded == report
    assert not loaded.ok


def test_print_summary_failed_run():
    out = render(print_summary, make_report())
    assert "Publish Summary (aborted)" in out
    assert "3 (1 converted, 1 skipped, 1 failed)" in out
    assert "spin.ipynb" in out
    assert "Converter exited with status 1" in out


def test_print_summary_done():
    report = BatchReport(
        state=BatchState.DONE,
        records=[FileRecord(name="spin.ipynb", state=FileState.MARKDOWN_CONVERTED)],
        published=["../docs/src/examples"],
    )
    out = render(print_summary, report)
    assert "Publish Summary" in out
    assert "(aborted)" not in out
    assert "../docs/src/examples" in out


def test_print_status():
    out = render(
        print_status, [("fock.ipynb", False, False), ("spin.ipynb", True, True)]
    )
    assert "fock.ipynb" in out
    assert "pending" in out
    assert "converted" in out


def test_print_status_empty():
    assert "No notebooks found" in render(print_status, [])


def test_publish_log(tmp_path):
    log_path = tmp_path / "logs" / "publish.log"
    start_publish_log(
        log_to_file=True,
        log_to_stdout=False,
        log_path=str(log_path),
        log_level=TEST_LOGLEVEL,
    )
    assert get_log_filename() == str(log_path)
    logger.info("converting spin.ipynb")
    logger.trace("converter argv built")
    shutdown_publish_log()

    text = log_path.read_text()
    assert "Publish log started" in text
    assert "converting spin.ipynb" in text
    assert "converter argv built" in text


def test_publish_log_clears_previous(tmp_path):
    log_path = tmp_path / "publish.log"
    log_path.write_text("old run\n")
    start_publish_log(log_to_file=True, log_to_stdout=False, log_path=str(log_path))
    shutdown_publish_log()
    assert "old run" not in log_path.read_text()


def test_clear_log_missing_file(tmp_path):
    clear_log(str(tmp_path / "nothing.log"))
