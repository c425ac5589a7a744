# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Process-wide cfsim settings.

Settings are read from ``CFSIM_``-prefixed environment variables and, once
:func:`configure` has been called, from ``cfsim.toml`` and
``cfsim.local.toml``.  They only supply *defaults*; an engine's own
configuration always wins.
"""

from __future__ import annotations

import json
import tomllib
import warnings
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, JsonValue
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource
from typing_extensions import TypeVar, overload

from cfsim.diagnostics import ConfigWarning
from cfsim.logging import get_logger

__all__ = [
    "cfsim_config",
    "configure",
    "load_config_data",
    "CFSimSettings",
    "SimilarityDefaults",
]

M = TypeVar("M", bound=BaseModel)
_log = get_logger(__name__)
_settings: CFSimSettings | None = None


def cfsim_config() -> CFSimSettings:
    """
    Get the active settings.  If :func:`configure` has not been called, this
    returns settings built from defaults and the environment.
    """
    if _settings is None:
        return CFSimSettings()
    else:
        return _settings


class SimilarityDefaults(BaseModel):
    """
    Defaults for newly-created similarity engines.
    """

    measure: str = "cosine"
    "The measure used when an engine's configuration does not name one."
    support_cache: bool = False
    "Whether engines memoize pair similarities by default."


class CFSimSettings(BaseSettings, extra="allow"):
    """
    Definition of cfsim settings.

    Nested values use ``__`` in environment variable names, so
    ``CFSIM_SIMILARITY__SUPPORT_CACHE=true`` turns on caching by default.
    """

    model_config = SettingsConfigDict(
        nested_model_default_partial_update=True,
        env_prefix="CFSIM_",
        env_nested_delimiter="__",
    )

    similarity: SimilarityDefaults = SimilarityDefaults()
    """
    Similarity engine defaults.
    """


def configure(cfg_dir: Path | None = None) -> CFSimSettings:
    """
    Initialize cfsim settings from configuration files.

    cfsim does not read configuration files on its own; without this call,
    settings come from defaults and environment variables only.  Environment
    variables take precedence over ``cfsim.local.toml``, which takes
    precedence over ``cfsim.toml``.

    Args:
        cfg_dir:
            The directory containing the configuration files.  Defaults to
            the current directory.
    """
    global _settings

    if _settings is not None:
        warnings.warn("cfsim already configured, overwriting configuration", ConfigWarning)

    base = cfg_dir if cfg_dir is not None else Path()

    class FileSettings(CFSimSettings):
        @classmethod
        def settings_customise_sources(
            cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
        ):
            return (
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
                TomlConfigSettingsSource(settings_cls, base / "cfsim.local.toml"),
                TomlConfigSettingsSource(settings_cls, base / "cfsim.toml"),
            )

    _settings = FileSettings()
    _log.debug("loaded settings", dir=str(base), settings=_settings.model_dump(mode="json"))
    return _settings


def reset_config():
    """
    Discard configured settings and return to environment-only defaults.
    """
    global _settings
    _settings = None


@overload
def load_config_data(path: Path | PathLike[str], model: None = None) -> JsonValue: ...
@overload
def load_config_data(path: Path | PathLike[str], model: type[M]) -> M: ...
def load_config_data(path: Path | PathLike[str], model: type[M] | None = None):
    """
    Load configuration data from a JSON or TOML file, optionally validating it
    with a model.

    Args:
        path:
            The path to the configuration file.
        model:
            The Pydantic model class to validate.
    """
    path = Path(path)
    text = path.read_text()

    match path.suffix:
        case ".json" if model is not None:
            return model.model_validate_json(text)
        case ".json":
            data = json.loads(text)
        case ".toml":
            data = tomllib.loads(text)
        case _:
            raise ValueError(f"unsupported configuration type for {path}")

    if model is None:
        return data
    else:
        return model.model_validate(data)
