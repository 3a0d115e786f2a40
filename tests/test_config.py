import logging
from datetime import datetime, timedelta, timezone

import pytest

from landing.config import LandingConfig
from landing.errors import ConfigError
from landing.logging_config import setup_logging
from landing.waitlist.clock import DEFAULT_START


def test_defaults_without_file() -> None:
    config = LandingConfig.load(environ={})

    assert (config.width, config.height, config.samples) == (1280, 720, 4)
    assert config.start_instant == DEFAULT_START
    assert config.supabase_url is None
    assert (config.base_count, config.default_count) == (71, 72)


def test_yaml_file_and_environment_override(tmp_path) -> None:
    path = tmp_path / "landing.yaml"
    path.write_text(
        "width: 1920\n"
        "height: 1080\n"
        "start_instant: '2025-10-01T09:00:00+00:00'\n"
        "supabase_url: https://file.supabase.co\n"
        "table: signups\n"
    )
    environ = {"NEXT_PUBLIC_SUPABASE_URL": "https://env.supabase.co",
               "SUPABASE_ANON_KEY": "secret"}

    config = LandingConfig.load(path, environ=environ)

    assert (config.width, config.height) == (1920, 1080)
    assert config.start_instant == datetime(2025, 10, 1, 9, tzinfo=timezone.utc)
    assert config.supabase_url == "https://env.supabase.co"
    assert config.supabase_anon_key == "secret"
    assert config.table == "signups"


def test_yaml_timestamp_with_offset(tmp_path) -> None:
    path = tmp_path / "landing.yaml"
    path.write_text("start_instant: 2025-09-20T07:30:00+05:30\n")

    config = LandingConfig.load(path, environ={})

    assert config.start_instant.utcoffset() is not None
    assert config.start_instant == datetime(2025, 9, 20, 7, 30,
                                            tzinfo=timezone(timedelta(hours=5, minutes=30)))


@pytest.mark.parametrize("content", [
    "colour: red\n",
    "width: 0\n",
    "start_instant: 'not a date'\n",
    "start_instant: '2025-09-20T07:30:00'\n",
    "- just\n- a list\n",
    "width: [unclosed\n",
])
def test_invalid_config_raises(tmp_path, content) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError):
        LandingConfig.load(path, environ={})


def test_missing_config_file(tmp_path) -> None:
    with pytest.raises(ConfigError):
        LandingConfig.load(tmp_path / "absent.yaml", environ={})


def test_setup_logging_configures_package_logger(tmp_path) -> None:
    log_file = tmp_path / "landing.log"
    setup_logging("debug", str(log_file))

    logger = logging.getLogger("landing")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    setup_logging(logging.WARNING)
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    logger.handlers.clear()
