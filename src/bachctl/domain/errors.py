"""Build error taxonomy.

INVARIANT: No exception crosses the pipeline boundary. Each of these is
caught at an action or tool-runner boundary and turned into a non-zero
exit code plus a log entry.
"""

from __future__ import annotations


class BachError(Exception):
    """Base class for every bachctl failure."""


class PreconditionError(BachError):
    """The build environment is structurally invalid (e.g. the base path)."""


class DescriptorFormatError(BachError, ValueError):
    """A module descriptor does not match ``module <name> { ... }``."""


class ToolDispatchError(BachError):
    """A tool could not be started, or an in-process provider raised."""


class CompileFailure(BachError):
    """The compiler returned a non-zero exit code for a realm."""

    def __init__(self, realm: str, code: int) -> None:
        super().__init__(f"{realm}.compile() failed with exit code {code}")
        self.realm = realm
        self.code = code
