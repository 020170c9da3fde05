"""
xlsx-templates - Exceptions

Errors raised while resolving template definitions and generating workbooks.
None of them is retried internally; they describe configuration or caller
mistakes and carry the offending name so the operator can fix it.
"""

from __future__ import annotations


class TemplateError(Exception):
    """Base class for all xlsx-templates errors."""


class ConfigurationError(TemplateError):
    """Template configuration is missing or inconsistent."""


class BlankNameError(ConfigurationError):
    """A template sheet declares an empty or blank name."""

    def __init__(self, kind: str = "sheet") -> None:
        self.kind = kind
        super().__init__(f"template {kind} name must not be blank")


class UnknownReferenceError(ConfigurationError):
    """
    A reference points to a name that is not declared.

    Attributes:
        kind: Reference kind ("sheet" or "template")
        name: The undeclared name
    """

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown template {kind}: {name}")


class CircularReferenceError(ConfigurationError):
    """
    An inheritance chain revisits a name that is still being resolved.

    Attributes:
        kind: Reference kind ("sheet" or "template")
        name: The name closing the cycle
    """

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Circular {kind} reference: {name}")


class InvalidArgumentError(TemplateError, ValueError):
    """A caller passed a missing or blank argument."""


class ValidationError(InvalidArgumentError):
    """A template definition handed to the generator is unusable."""


class UnknownInstrumentTypeError(InvalidArgumentError):
    """No resolved template exists for the requested instrument type."""

    def __init__(self, instrument_type: str) -> None:
        self.instrument_type = instrument_type
        super().__init__(f"Unknown instrument type: {instrument_type}")
