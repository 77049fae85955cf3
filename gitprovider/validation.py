"""Field validation helpers.

A ``Validator`` collects every violation for one object so that a single
call reports all missing or invalid fields at once.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from gitprovider.exceptions import InvalidServerDataError, ValidationError


class Validator:
    """Accumulates field violations for a named object.

    Example:
        ```python
        validator = Validator("GitHub.Repository")
        if not obj.get("name"):
            validator.required("name")
        validator.raise_if_invalid()
        ```
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._errors: list[str] = []

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    def required(self, *fields: str) -> None:
        """Record that a required field is unset."""
        self._errors.append(f"{self._path(fields)}: field is required")

    def invalid(self, value: Any, *fields: str) -> None:
        """Record that a field holds a value outside its allowed set."""
        self._errors.append(f"{self._path(fields)}: invalid value {value!r}")

    def check_enum(self, value: Any, allowed: Iterable[str], *fields: str) -> None:
        """Record a violation if ``value`` is not one of ``allowed``.

        Enum members and their raw values are interchangeable.
        """
        allowed_values = [a.value if isinstance(a, Enum) else a for a in allowed]
        raw = value.value if isinstance(value, Enum) else value
        if raw not in allowed_values:
            self.invalid(value, *fields)

    def error(self, server_data: bool = False) -> ValidationError | None:
        """Return the accumulated error, or None when the object is valid."""
        if not self._errors:
            return None
        message = f"{self.name} is invalid: " + "; ".join(self._errors)
        if server_data:
            return InvalidServerDataError(
                "INVALID_SERVER_DATA", message, errors=self.errors
            )
        return ValidationError("VALIDATION_ERROR", message, errors=self.errors)

    def raise_if_invalid(self, server_data: bool = False) -> None:
        err = self.error(server_data=server_data)
        if err is not None:
            raise err

    def _path(self, fields: tuple[str, ...]) -> str:
        return ".".join((self.name, *fields))


def validate_target(name: str, target: Any) -> None:
    """Validate an object exposing ``validate_fields(validator)``."""
    validator = Validator(name)
    target.validate_fields(validator)
    validator.raise_if_invalid()
