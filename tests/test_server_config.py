"""
Tests for gunicorn.conf.py: the server points at this app and shares its settings.
"""
import importlib.util
from pathlib import Path

from telesales.core.config import settings

CONF_PATH = Path(__file__).resolve().parents[1] / "gunicorn.conf.py"


def _load_conf():
    spec = importlib.util.spec_from_file_location("gunicorn_conf", CONF_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class _Log:
    def __init__(self):
        self.lines = []

    def info(self, msg, *args):
        self.lines.append(msg % args)


class _Server:
    def __init__(self):
        self.log = _Log()


class TestGunicornConf:

    def test_serves_the_telesales_app(self):
        conf = _load_conf()
        assert conf.wsgi_app == "telesales.main:app"
        assert conf.worker_class == "uvicorn.workers.UvicornWorker"

    def test_log_level_follows_settings(self):
        assert _load_conf().loglevel == settings.LOG_LEVEL.lower()

    def test_on_starting_reports_streak_timezone(self):
        server = _Server()
        _load_conf().on_starting(server)
        assert server.log.lines == [f"Streak calendar days use {settings.streak_tz.key}"]
