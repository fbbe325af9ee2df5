"""
Shared pytest fixtures: project import path, fake AWS credentials, an isolated
config.json and a fixed-timestamp BackupSession.
"""

import datetime
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
import utils
import zvlib.config as cfg_mod
from zvlib.session import BackupSession

RUN_TIME = datetime.datetime(2026, 10, 18, 9, 30, 0)


@pytest.fixture(autouse=True)
def fake_aws_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv(cfg_mod.BASE_DIR_ENV, raising=False)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Point config.json at a throwaway directory and reset the singleton."""
    config_file = tmp_path_factory.mktemp("config") / "config.json"
    monkeypatch.setattr(cfg_mod, "_config_path", lambda: config_file)
    cfg_mod._CONFIG_LOADED = False
    cfg_mod.CONFIG_DATA = {}
    yield config_file
    cfg_mod._CONFIG_LOADED = False
    cfg_mod.CONFIG_DATA = {}


@pytest.fixture(autouse=True)
def reset_loggers():
    yield
    for name in (utils.LOGGER_NAME,) + utils.LIBRARY_LOGGER_NAMES:
        target = logging.getLogger(name)
        for handler in target.handlers:
            handler.close()
        target.handlers = []
        target.propagate = True
    utils.logger = None
    utils._logging_configured = False


@pytest.fixture
def session(tmp_path):
    started = BackupSession.start(now=RUN_TIME, base_dir=tmp_path)
    # Drop the config cached while building the session so a test can still
    # write its own config.json afterwards.
    cfg_mod._CONFIG_LOADED = False
    cfg_mod.CONFIG_DATA = {}
    return started
