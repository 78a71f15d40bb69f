"""Error types raised by the scoring engines.

Hard errors (``ConfigurationError``, ``InvariantViolationError``) abort the
affected unit of work. ``NonConvergenceWarning`` is soft and is emitted via
the ``warnings`` module alongside the last-iteration result. Empty inputs are
not an error anywhere: they resolve to zero, empty or None results.
"""


class ArcScoringError(Exception):
    """Base class for scoring engine errors."""


class ConfigurationError(ArcScoringError, ValueError):
    """Configuration is internally inconsistent (e.g. floor > cap)."""


class InvariantViolationError(ArcScoringError, RuntimeError):
    """A computed result broke a contract downstream consumers rely on."""


class NonConvergenceWarning(RuntimeWarning):
    """An iterative computation hit its iteration cap before converging."""
