"""Runtime settings and the click context object."""

import os
from typing import Optional

import click
from pydantic import BaseModel, Field, ValidationError

from .converter import DEFAULT_BUFFER_SIZE
from .lexer import DEFAULT_CHUNK_SIZE

CHUNK_SIZE_ENV = "JSON2YAML_CHUNK_SIZE"
BUFFER_SIZE_ENV = "JSON2YAML_BUFFER_SIZE"


class Settings(BaseModel):
    """Tuning knobs for a conversion.

    Neither setting changes the output, only how much text is held in
    memory at once.
    """

    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    """Characters (or bytes) read from the input per refill."""

    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    """Characters of output collected before they are written out."""


class SettingsError(ValueError):
    """Invalid setting supplied on the command line or in the environment."""

    pass


def _from_env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def resolve_settings(
    chunk_size: Optional[int] = None, buffer_size: Optional[int] = None
) -> Settings:
    """Resolve settings from explicit values, the environment and defaults.

    Resolution order for each setting:
    1. Explicit value (CLI option)
    2. $JSON2YAML_CHUNK_SIZE / $JSON2YAML_BUFFER_SIZE
    3. Built-in default

    Reads fresh from environment each time.

    Raises:
        SettingsError: If a value is not a positive integer
    """
    values = {}
    for field, explicit, env_name in (
        ("chunk_size", chunk_size, CHUNK_SIZE_ENV),
        ("buffer_size", buffer_size, BUFFER_SIZE_ENV),
    ):
        if explicit is not None:
            values[field] = explicit
        else:
            env_value = _from_env(env_name)
            if env_value is not None:
                values[field] = env_value

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise SettingsError(f"invalid settings: {problems}") from None


class Json2YamlContext:
    def __init__(self):
        self.settings = Settings()
        self.failed = False


pass_context = click.make_pass_decorator(Json2YamlContext, ensure=True)


__all__ = [
    "BUFFER_SIZE_ENV",
    "CHUNK_SIZE_ENV",
    "Json2YamlContext",
    "Settings",
    "SettingsError",
    "pass_context",
    "resolve_settings",
]
