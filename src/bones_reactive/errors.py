"""Error hierarchy for the reactive runtime.

Every error raised by bones_reactive inherits from ReactiveError. They all
signal programmer mistakes: they are raised at the point of misuse and the
runtime never retries or absorbs them.
"""


class ReactiveError(Exception):
    """Base error for all reactive runtime operations."""


class CrossThreadAccessError(ReactiveError):
    """A handle was used on a thread other than the one that created it."""


class NestedEffectError(ReactiveError):
    """An effect was created while another effect body was evaluating."""


class TypeMismatchError(ReactiveError, TypeError):
    """A handle's declared type does not match the stored value's type."""


class CycleError(ReactiveError):
    """A node would (transitively) depend on itself, or writes never settle."""


class DisposedError(ReactiveError):
    """The handle refers to a node that no longer exists in the graph."""


class ConfigError(ReactiveError):
    """Invalid runtime configuration."""
