import logging

import pytest

import log_setup


@pytest.fixture
def clean_root():
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if getattr(handler, "_tabfit", False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.mark.parametrize(
    "cli, env, cfg, expected",
    [
        ("debug", "ERROR", {"log_level": "INFO"}, "DEBUG"),
        (None, "error", {"log_level": "INFO"}, "ERROR"),
        (None, None, {"log_level": "INFO"}, "INFO"),
        (None, None, None, "WARNING"),
        ("loud", "nope", {"log_level": "INFO"}, "INFO"),
    ],
)
def test_resolve_log_level_precedence(monkeypatch, cli, env, cfg, expected):
    if env is None:
        monkeypatch.delenv(log_setup.ENV_LOG_LEVEL, raising=False)
    else:
        monkeypatch.setenv(log_setup.ENV_LOG_LEVEL, env)
    assert log_setup.resolve_log_level(cli, cfg) == expected


def test_configure_logging_writes_to_the_file(tmp_path, clean_root):
    path = tmp_path / "tabfit.log"
    handler = log_setup.configure_logging("DEBUG", str(path))

    logging.getLogger("tabfit.test").debug("widths %s", [4, 13])
    handler.flush()

    text = path.read_text(encoding="utf-8")
    assert "DEBUG tabfit.test: widths [4, 13]" in text


def test_configure_logging_replaces_its_previous_handler(tmp_path, clean_root):
    log_setup.configure_logging("INFO", str(tmp_path / "a.log"))
    log_setup.configure_logging("ERROR", str(tmp_path / "b.log"))

    ours = [h for h in clean_root.handlers if getattr(h, "_tabfit", False)]
    assert len(ours) == 1
    assert clean_root.level == logging.ERROR
