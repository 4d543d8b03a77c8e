"""Exceptions raised while loading joint configuration.

Every failure that aborts a joint load derives from
:class:`JointConfigError`, so callers that only care about
success/failure catch one type.  A key that is simply absent is *not*
an error: optional lookups fall back to their default and only the
mandatory unit count raises :class:`MissingKeyError`.
"""

from __future__ import annotations

from typing import Any


class JointConfigError(Exception):
    """Base exception for all joint configuration errors."""

    pass


class SourceOpenError(JointConfigError):
    """The configuration document could not be opened or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open configuration {path}: {reason}")


class MissingKeyError(JointConfigError):
    """A mandatory key is absent from the document."""

    def __init__(self, key: str, section: str) -> None:
        self.key = key
        self.section = section
        super().__init__(f"Missing required key [{section}]{key}")


class ConversionError(JointConfigError):
    """A present value cannot be converted to the expected type."""

    def __init__(
        self, key: str, section: str, value: Any, expected: str,
    ) -> None:
        self.key = key
        self.section = section
        self.value = value
        self.expected = expected
        super().__init__(
            f"[{section}]{key} = {value!r} is not a valid {expected}"
        )


class JointRangeError(JointConfigError):
    """Requested joint index is outside the configured machine size."""

    def __init__(self, joint: int, axes: int) -> None:
        self.joint = joint
        self.axes = axes
        super().__init__(
            f"Joint {joint} out of range: machine has {axes} joint(s)"
        )


class ControllerRejection(JointConfigError):
    """A controller setter reported failure."""

    def __init__(self, joint: int, setter: str) -> None:
        self.joint = joint
        self.setter = setter
        super().__init__(f"Controller rejected {setter} for joint {joint}")
