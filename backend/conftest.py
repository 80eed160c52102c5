"""Root conftest: test environment, structlog routed through stdlib for caplog, isolated data files."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import stdlib_processors

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

structlog.configure(
    processors=stdlib_processors(),
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Prevent bound context leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def _isolated_data_file(tmp_path, monkeypatch):
    """Keep any server built from default settings from writing into the checkout."""
    monkeypatch.setenv("WHIST_DATA_FILE", str(tmp_path / "whist.json"))
    monkeypatch.setenv("WHIST_LOG_DIR", str(tmp_path / "logs"))
