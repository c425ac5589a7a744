# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"Definition of the configurable component interface."

# pyright: strict
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from types import NoneType

from pydantic import JsonValue, TypeAdapter
from typing_extensions import Any, Generic, Mapping, TypeVar, get_origin, get_type_hints

COut = TypeVar("COut", covariant=True, default=Any)
"""
Return type for a component.
"""


class Component(ABC, Generic[COut]):
    """
    Base class for configurable cfsim objects.

    Components are configured through a Pydantic model (or dataclass) whose
    type is declared on the ``config`` attribute::

        class MyComponent(Component[float]):
            config: MyComponentConfig

    The constructor accepts either a configuration object or keyword arguments
    that are validated into one, and stores it in ``config``.

    Args:
        config:
            The configuration object.  If ``None``, the configuration class is
            instantiated from ``kwargs``.
    """

    config: Any = None
    """
    The component configuration object.  Subclasses redefine this attribute
    with their configuration class type.
    """

    def __init__(self, config: object | None = None, **kwargs: Any):
        if config is None:
            config = self.validate_config(kwargs)
        elif kwargs:
            raise RuntimeError("cannot supply both a configuration object and kwargs")

        cfg_cls = self.config_class()
        if cfg_cls and not isinstance(config, cfg_cls):
            raise TypeError(f"invalid configuration type {type(config)}")

        self.config = config

    @classmethod
    def config_class(cls) -> type | None:
        hints = get_type_hints(cls)
        ct = hints.get("config", None)
        if ct is None or ct == NoneType or ct == Any:
            return None
        elif isinstance(ct, type):
            return ct
        else:
            return get_origin(ct)

    def dump_config(self) -> dict[str, JsonValue]:
        """
        Dump the configuration to JSON-serializable format.
        """
        cfg_cls = self.config_class()
        if cfg_cls:
            return TypeAdapter(cfg_cls).dump_python(self.config, mode="json")  # type: ignore
        else:
            return {}

    @classmethod
    def validate_config(cls, data: Mapping[str, JsonValue] | None = None) -> object | None:
        """
        Validate and return a configuration object for this component.
        """
        if data is None:
            data = {}
        cfg_cls = cls.config_class()
        if cfg_cls:
            return TypeAdapter(cfg_cls).validate_python(data)  # type: ignore
        elif data:  # pragma: nocover
            raise RuntimeError(
                "supplied configuration options but {} has no config class".format(cls.__name__)
            )
        else:
            return None

    @abstractmethod
    def __call__(self, *args: Any, **kwargs: Any) -> COut:  # pragma: nocover
        """
        Run the component's operation and produce a result.
        """
        ...

    def __repr__(self) -> str:
        params = json.dumps(self.dump_config(), indent=4)
        return f"<{self.__class__.__name__} {params}>"
