# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.


from __future__ import annotations
from typing import TYPE_CHECKING, Any

import dataclasses
import json
import logging
import os
import warnings

from callsite.errors import CallsiteWarning

from ._reflection._base import struct
from ._reflection._enums import Visibility

if TYPE_CHECKING:
    import argparse
    from collections.abc import Mapping
    from typing_extensions import Self


logger = logging.getLogger(__name__)

ENV_VAR = "CALLSITE_CONFIG"


@struct
class EngineConfig:
    visibility: Visibility = Visibility.DEFAULT
    no_warn: bool = False
    max_hierarchy_depth: int = 64
    max_rebind_attempts: int = 3
    color: bool | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """
        Build a configuration from the environment.

        CALLSITE_CONFIG is a JSON object in the form:
        {
            "visibility": ["PUBLIC", "INSTANCE", "STATIC"],
            "no_warn": false,
            "max_hierarchy_depth": 64,
            "max_rebind_attempts": 3,
            "color": null
        }
        """
        if environ is None:
            environ = os.environ
        config = cls()
        raw = environ.get(ENV_VAR)
        if not raw:
            return config
        try:
            values = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"{ENV_VAR} is not valid JSON: {e}") from e
        if not isinstance(values, dict):
            raise ValueError(f"{ENV_VAR} must be a JSON object")

        for key, value in values.items():
            m = getattr(config, f"_apply_env_{key}", None)
            if m is None:
                warnings.warn(
                    f"Skipping unknown environment config: {key}",
                    CallsiteWarning,
                    stacklevel=2,
                )
                continue
            config = m(value)

        logger.debug("configuration from %s: %r", ENV_VAR, config)
        return config

    def apply_cli_args(self, args: argparse.Namespace) -> Self:
        config = self
        if getattr(args, "force", None):
            config = dataclasses.replace(
                config, visibility=config.visibility | Visibility.FORCE
            )
        if getattr(args, "non_public", None):
            config = dataclasses.replace(
                config, visibility=config.visibility | Visibility.NON_PUBLIC
            )
        if getattr(args, "no_warn", None) is not None:
            config = dataclasses.replace(config, no_warn=args.no_warn)
        if getattr(args, "color", None) is not None:
            config = dataclasses.replace(config, color=args.color)
        return config

    def _apply_env_visibility(self, value: Any) -> Self:
        if isinstance(value, str):
            names = [v.strip() for v in value.split("|")]
        elif isinstance(value, list) and all(
            isinstance(v, str) for v in value
        ):
            names = value
        else:
            raise ValueError(
                '"visibility" must be a string or a list of strings'
            )
        flags = Visibility(0)
        for name in names:
            try:
                flags |= Visibility[name.upper()]
            except KeyError:
                raise ValueError(
                    f'"visibility": unknown flag {name!r}'
                ) from None
        return dataclasses.replace(self, visibility=flags)

    def _apply_env_no_warn(self, value: Any) -> Self:
        if not isinstance(value, bool):
            raise ValueError('"no_warn" must be a boolean')
        return dataclasses.replace(self, no_warn=value)

    def _apply_env_max_hierarchy_depth(self, value: Any) -> Self:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError('"max_hierarchy_depth" must be a positive integer')
        return dataclasses.replace(self, max_hierarchy_depth=value)

    def _apply_env_max_rebind_attempts(self, value: Any) -> Self:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(
                '"max_rebind_attempts" must be a non-negative integer'
            )
        return dataclasses.replace(self, max_rebind_attempts=value)

    def _apply_env_color(self, value: Any) -> Self:
        if value is not None and not isinstance(value, bool):
            raise ValueError('"color" must be a boolean or null')
        return dataclasses.replace(self, color=value)
