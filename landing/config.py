"""
Configuration for the landing app.

Values come from an optional YAML file; Supabase credentials can be
overridden from the environment.
"""

import os
from dataclasses import dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Union

import yaml

from .errors import ConfigError
from .waitlist.clock import DEFAULT_START

ENV_URL_KEYS = ("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL")
ENV_KEY_KEYS = ("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY")


def _first_env(environ: Mapping[str, str], keys) -> Optional[str]:
    for key in keys:
        if environ.get(key):
            return environ[key]
    return None


@dataclass
class LandingConfig:
    width: int = 1280
    height: int = 720
    samples: int = 4
    fps: int = 60
    start_instant: datetime = field(default_factory=lambda: DEFAULT_START)
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    table: str = "waitlist"
    base_count: int = 71
    default_count: int = 72
    log_level: str = "INFO"

    def __post_init__(self):
        if isinstance(self.start_instant, str):
            try:
                self.start_instant = datetime.fromisoformat(self.start_instant)
            except ValueError as e:
                raise ConfigError(f"Invalid start_instant: {self.start_instant!r}") from e
        if self.start_instant.tzinfo is None:
            raise ConfigError("start_instant must include a UTC offset")
        for name in ("width", "height", "fps"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")
        if self.samples < 0:
            raise ConfigError("samples must be >= 0")

    @classmethod
    def from_dict(cls, data: Mapping) -> "LandingConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**dict(data))

    @classmethod
    def load(cls, path: Union[str, Path, None] = None,
             environ: Optional[Mapping[str, str]] = None) -> "LandingConfig":
        """
        Load configuration.

        Args:
            path: YAML file (optional)
            environ: Environment mapping (default: os.environ)

        Returns:
            LandingConfig
        """
        data = {}
        if path is not None:
            path = Path(path)
            if not path.exists():
                raise ConfigError(f"Config file does not exist: {path}")
            with open(path) as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid YAML in {path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config file must contain a mapping: {path}")

        environ = os.environ if environ is None else environ
        url = _first_env(environ, ENV_URL_KEYS)
        key = _first_env(environ, ENV_KEY_KEYS)
        if url:
            data["supabase_url"] = url
        if key:
            data["supabase_anon_key"] = key

        return cls.from_dict(data)
