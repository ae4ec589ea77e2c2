"""
Where the server's ``X402_*`` settings come from.

Three layers are merged: the process environment (or an explicit ``base``),
a ``.env`` file that only fills keys the environment leaves unset, and
explicit overrides such as the CLI's ``--set`` flags. Variables without the
``X402_`` prefix never take part. Every resolved value remembers the layer
that supplied it, so a bad setting can be traced to its file or flag.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional

from .errors import ConfigError

__all__ = [
    "ENV_PREFIX",
    "ResolvedEnvironment",
    "build_environment",
    "load_env_file",
]

ENV_PREFIX = "X402_"

ORIGIN_ENVIRON = "environment"
ORIGIN_OVERRIDE = "override"

_KEY = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _parse_env_file(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for lineno, raw_line in enumerate(data.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        key, separator, value = line.partition("=")
        key = key.strip()
        if not separator or not _KEY.fullmatch(key):
            raise ConfigError(f"{path}:{lineno}: expected KEY=VALUE, got {raw_line.strip()!r}")
        values[key] = _unquote(value.strip())
    return values


def _scoped(values: Mapping[str, str]) -> Dict[str, str]:
    return {key: value for key, value in values.items() if key.startswith(ENV_PREFIX)}


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Export the ``X402_*`` keys of ``path`` into ``environ`` (default
    :data:`os.environ`), leaving keys that are already set alone.

    Returns the ``X402_*`` view of ``environ`` after loading.
    """
    target: MutableMapping[str, str] = environ if environ is not None else os.environ
    for key, value in _scoped(_parse_env_file(Path(path))).items():
        target.setdefault(key, value)
    return _scoped(target)


@dataclass(frozen=True)
class ResolvedEnvironment:
    variables: Mapping[str, str]
    # key -> "environment", "override" or the path of the .env file
    origins: Mapping[str, str] = field(default_factory=dict)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def origin(self, key: str) -> Optional[str]:
        return self.origins.get(key)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> ResolvedEnvironment:
    """
    Resolve the ``X402_*`` settings from ``base`` (default
    :data:`os.environ`), ``env_file`` and ``overrides``.

    Pass ``env_file=None`` to skip file loading. Override keys without the
    ``X402_`` prefix raise :class:`ConfigError`.
    """
    variables: Dict[str, str] = {}
    origins: Dict[str, str] = {}

    for key, value in _scoped(os.environ if base is None else base).items():
        variables[key] = value
        origins[key] = ORIGIN_ENVIRON

    if env_file is not None:
        for key, value in _scoped(_parse_env_file(Path(env_file))).items():
            if key not in variables:
                variables[key] = value
                origins[key] = env_file

    for key, value in (overrides or {}).items():
        if not key.startswith(ENV_PREFIX):
            raise ConfigError(f"Override '{key}' is not an {ENV_PREFIX}* setting")
        variables[key] = value
        origins[key] = ORIGIN_OVERRIDE

    return ResolvedEnvironment(variables=variables, origins=origins)
