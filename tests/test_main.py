import io
import json
import logging
import sys

import pytest
import yaml

import bucket_queue.main as bq_main
from bucket_queue import BucketQueue
from bucket_queue.config import Config
from bucket_queue.main import MainService, parse_line
from bucket_queue.main import _configure_logging as configure_logging


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch):
    monkeypatch.setattr(bq_main, "_configure_logging", lambda: None)


def test_parse_line():
    assert parse_line("3 hello world\n") == (3, "hello world")
    assert parse_line("  # comment") is None
    assert parse_line("   ") is None
    assert parse_line("2") == (2, "")
    with pytest.raises(ValueError):
        parse_line("x value")


def test_run_orders_lines():
    stdin = io.StringIO("2 c\n0 a\n\n1 b\n0 a2\n")
    stdout = io.StringIO()
    code = MainService(argv=["--slots", "3"]).run(stdin=stdin, stdout=stdout)
    assert code == 0
    assert stdout.getvalue() == "0\ta2\n0\ta\n1\tb\n2\tc\n"


def test_run_reports_rejected_lines(caplog):
    stdout = io.StringIO()
    with caplog.at_level(logging.WARNING, logger="bucket_queue.main"):
        code = MainService(argv=["--slots", "2"]).run(
            stdin=io.StringIO("5 far\nbad line\n1 ok\n"), stdout=stdout
        )
    assert code == 1
    assert stdout.getvalue() == "1\tok\n"
    messages = [r.getMessage() for r in caplog.records]
    assert any("larger than upper bound" in m for m in messages)
    assert any("malformed" in m for m in messages)


def test_run_uses_config_slots_and_input_file(tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"priority_slots": 2}))
    entries = tmp_path / "in.txt"
    entries.write_text("1 b\n0 a\n2 c\n")
    stdout = io.StringIO()
    code = MainService(
        argv=["--config", str(cfg), "--input", str(entries)]
    ).run(stdout=stdout)
    assert code == 1
    assert stdout.getvalue() == "0\ta\n1\tb\n"


def test_fill_counts_rejections():
    q = BucketQueue(1)
    assert MainService.fill(q, ["0 a", "1 b", "# note"]) == 1
    assert q.pop() == (0, "a")


def test_negative_slots_is_usage_error():
    with pytest.raises(SystemExit):
        MainService(argv=["--slots", "-1"]).run(stdin=io.StringIO(""))


def test_run_rejects_bad_config_slots(tmp_path):
    for bad in (-3, "many", 2.5):
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"priority_slots": bad}))
        with pytest.raises(SystemExit) as info:
            MainService(argv=["--config", str(cfg)]).run(stdin=io.StringIO(""))
        assert info.value.code == 2


def _isolate_root_logging(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    return root


def _close_file_handlers(root):
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


def test_configure_logging_writes_to_file(tmp_path, monkeypatch):
    root = _isolate_root_logging(monkeypatch)
    log_path = tmp_path / "x.log"
    Config.logging = {
        "level": "DEBUG",
        "format": "%(levelname)s %(name)s: %(message)s",
        "file": str(log_path),
    }
    try:
        configure_logging()
        assert root.level == logging.DEBUG
        logging.getLogger("bucket_queue.queue").debug("resync check")
        try:
            raise ValueError("boom")
        except ValueError as exc:
            sys.excepthook(ValueError, exc, exc.__traceback__)
    finally:
        _close_file_handlers(root)
    text = log_path.read_text()
    assert "DEBUG bucket_queue.queue: resync check" in text
    assert "ERROR bucket_queue.main: Uncaught exception" in text
    assert "ValueError: boom" in text


def test_configure_logging_uses_relative_yaml_file(tmp_path, monkeypatch):
    root = _isolate_root_logging(monkeypatch)
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(yaml.safe_dump({"logging": {"level": "INFO", "file": "run.log"}}))
    Config.load_from_file(str(cfg))
    try:
        configure_logging()
        logging.getLogger("bucket_queue.main").info("from yaml")
        logging.getLogger("bucket_queue.main").debug("filtered out")
    finally:
        _close_file_handlers(root)
    text = (tmp_path / "run.log").read_text()
    assert "from yaml" in text
    assert "filtered out" not in text
