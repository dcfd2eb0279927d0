"""Runtime configuration.

RuntimeConfig is frozen; each thread's Runtime holds one. configure() swaps
the current thread's config for an updated copy.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

from bones_reactive.errors import ConfigError

ENV_PREFIX = "BONES_REACTIVE_"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Configuration for a thread's reactive runtime.

    Attributes:
        max_flush_passes: Upper bound on passes over queued effects before a
            write is considered a runaway loop and CycleError is raised.
        clone_on_get: ``get()`` returns a shallow copy of the stored value.
            ``with_()`` always passes the stored value itself.
        log_reruns: Emit a DEBUG record for every effect re-run.

    """

    max_flush_passes: int = 100
    clone_on_get: bool = True
    log_reruns: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.max_flush_passes, int) or self.max_flush_passes < 1:
            raise ConfigError(f"max_flush_passes must be a positive int, got {self.max_flush_passes!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RuntimeConfig:
        """Build a config from ``BONES_REACTIVE_*`` environment variables."""
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _parse(f.name, raw, f.default)
        return cls(**values)


def _parse(name: str, raw: str, default: object) -> object:
    text = raw.strip().lower()
    if isinstance(default, bool):
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ConfigError(f"{ENV_PREFIX}{name.upper()} must be a boolean, got {raw!r}")
    try:
        return int(text)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}") from None


def configure(**changes: object) -> RuntimeConfig:
    """Update the current thread's runtime config and return the new one."""
    from bones_reactive._runtime import current_runtime

    runtime = current_runtime()
    try:
        runtime.config = replace(runtime.config, **changes)
    except TypeError as exc:
        raise ConfigError(str(exc)) from None
    return runtime.config
