"""bones_reactive: a thread-confined signal/effect runtime with fine-grained dependency tracking."""

from importlib.metadata import version as _version

__version__ = _version("bones-reactive")

from bones_reactive._runtime import current_runtime, reset_runtime
from bones_reactive.batch import batch, batched, pending_count
from bones_reactive.config import RuntimeConfig, configure
from bones_reactive.effect import Effect, create_effect, effect
from bones_reactive.errors import (
    ConfigError,
    CrossThreadAccessError,
    CycleError,
    DisposedError,
    NestedEffectError,
    ReactiveError,
    TypeMismatchError,
)
from bones_reactive.signal import ReadSignal, RwSignal, WriteSignal, create_rw_signal, create_signal
# textual NOT auto-imported (opt-in only)

__all__ = [
    "create_signal",
    "create_rw_signal",
    "ReadSignal",
    "WriteSignal",
    "RwSignal",
    "create_effect",
    "effect",
    "Effect",
    "batch",
    "batched",
    "pending_count",
    "current_runtime",
    "reset_runtime",
    "RuntimeConfig",
    "configure",
    "ReactiveError",
    "CrossThreadAccessError",
    "NestedEffectError",
    "TypeMismatchError",
    "CycleError",
    "DisposedError",
    "ConfigError",
]
