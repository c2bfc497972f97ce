import logging
import os
import tomllib
from pathlib import Path
from typing import Any

# path of a TOML file overriding the defaults, `config.toml` in the working directory otherwise
SETTINGS_ENV = "JSONAPI_TABULAR_SETTINGS"
TRUE_VALUES = ("true", "1", "t", "y", "yes")


def cast_env_value(default: Any, raw: str) -> Any:
    """Cast an environment value to the type of the setting it overrides."""
    if isinstance(default, list):
        return [item.strip() for item in raw.split(",") if item.strip()]
    # bool first, it is a subclass of int
    if isinstance(default, bool):
        return raw.strip().lower() in TRUE_VALUES
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


class Configurator:
    """
    Settings of the service, readable as attributes (`config.PGREST_ENDPOINT`).

    Defaults come from `config_default.toml`, then a settings file and finally
    environment variables of the same name override them.
    """

    configuration = None

    def __init__(self):
        if not self.configuration:
            self.configure()

    def configure(self):
        with open(Path(__file__).parent / "config_default.toml", "rb") as f:
            configuration = tomllib.load(f)

        settings_file = Path(os.environ.get(SETTINGS_ENV, Path.cwd() / "config.toml"))
        if settings_file.exists():
            with open(settings_file, "rb") as f:
                settings = tomllib.load(f)
            # a relative schema path is read from the settings file directory
            schema_path = settings.get("SCHEMA_PATH")
            if schema_path and not Path(schema_path).is_absolute():
                settings["SCHEMA_PATH"] = str(settings_file.parent / schema_path)
            configuration.update(settings)

        for key, default in configuration.items():
            if key in os.environ:
                configuration[key] = cast_env_value(default, os.environ[key])

        self.configuration = configuration
        self.check()

    def override(self, **kwargs):
        self.configuration.update(kwargs)
        self.check()

    def check(self):
        """Normalize the settings that have a canonical form, reject invalid ones"""
        endpoint = self.configuration["PGREST_ENDPOINT"].rstrip("/")
        if not endpoint.startswith(("http://", "https://")):
            endpoint = f"http://{endpoint}"
        self.configuration["PGREST_ENDPOINT"] = endpoint

        if self.configuration["SCHEME"] not in ("http", "https"):
            raise ValueError(f"SCHEME must be 'http' or 'https', got {self.configuration['SCHEME']!r}")

        level = str(self.configuration["LOG_LEVEL"]).upper()
        # getLevelName maps known names to their number, anything else to a string
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL {self.configuration['LOG_LEVEL']!r} is not a logging level")
        self.configuration["LOG_LEVEL"] = level

    def __getattr__(self, __name):
        return self.configuration.get(__name)

    @property
    def __dict__(self):
        return self.configuration


config = Configurator()
