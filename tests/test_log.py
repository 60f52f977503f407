import logging

from lingpdf.utils import log


def test_configure_logging_installs_basic_config(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    log.configure_logging(logging.DEBUG)

    assert calls == [{"level": logging.DEBUG, "format": log.LOG_FORMAT}]


def test_importing_does_not_touch_root_logger():
    import lingpdf.core  # noqa: F401

    assert logging.getLogger("lingpdf").handlers == []
