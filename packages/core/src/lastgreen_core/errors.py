"""Error taxonomy for commit resolution.

Two kinds of failure abort a resolution: the invocation was misconfigured, or
the run-tracking service could not be reached. "No matching run" is not an
error; the resolver reports it as a Resolution with an empty commit id.
"""

from __future__ import annotations


class LastGreenError(Exception):
    """Base class for every fatal lastgreen error."""


class ConfigurationError(LastGreenError):
    """A required input (branch context, credential, repository) is missing or malformed."""


class RetrievalError(LastGreenError):
    """A call to the run-tracking service failed.

    The original exception is chained as ``__cause__``; the message repeats it so
    CI logs show the underlying reason without a traceback.
    """
