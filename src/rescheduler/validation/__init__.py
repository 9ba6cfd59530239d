"""Validation helpers."""

from .errors import InvalidInputError, ValidationError, ValidationReport
from .domain_validator import validate_domain_inputs
from .request import validate_options_request
from .schema_validator import validate_inputs_with_schema, validate_options_output_with_schema

__all__ = [
    "InvalidInputError",
    "ValidationError",
    "ValidationReport",
    "validate_domain_inputs",
    "validate_inputs_with_schema",
    "validate_options_output_with_schema",
    "validate_options_request",
]
