"""Validation of user-supplied inputs."""
from __future__ import annotations
import os

from cqlpy.core.errors import UserInputError


class ValidationError(UserInputError):
    """Exception raised for validation failures."""


def validate_script_file(filepath: str) -> None:
    """Validate that a CQL script exists and is readable."""
    if not os.path.exists(filepath):
        raise ValidationError(f"Script file not found: {filepath}")
    if not os.path.isfile(filepath):
        raise ValidationError(f"Path is not a file: {filepath}")
    if not os.access(filepath, os.R_OK):
        raise ValidationError(f"File not readable: {filepath}")


def validate_port(port: int) -> None:
    if not 0 < port < 65536:
        raise ValidationError(f"Port out of range: {port}")
