from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import FormatChecker

RESPONSE_SCHEMA = "jsonrpc.response.schema.json"


class EnvelopeValidationError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class EnvelopeRegistry:
    schema_root: Path
    _validators: dict[str, jsonschema.Validator] = field(
        default_factory=dict, compare=False, repr=False
    )

    @classmethod
    def default(cls) -> "EnvelopeRegistry":
        return cls(schema_root=Path(__file__).resolve().parent / "schemas")

    def schema_path(self, schema_filename: str) -> Path:
        return self.schema_root / schema_filename

    def load_schema(self, schema_filename: str) -> dict[str, Any]:
        path = self.schema_path(schema_filename)
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def validator_for(self, schema_filename: str) -> jsonschema.Validator:
        cached = self._validators.get(schema_filename)
        if cached is not None:
            return cached
        schema = self.load_schema(schema_filename)
        validator_cls = jsonschema.validators.validator_for(schema)
        validator_cls.check_schema(schema)
        validator = validator_cls(schema, format_checker=FormatChecker())
        self._validators[schema_filename] = validator
        return validator

    def validate_response(self, instance: Any) -> None:
        validator = self.validator_for(RESPONSE_SCHEMA)
        errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
        if errors:
            formatted = [self._format_error(err) for err in errors]
            raise EnvelopeValidationError(
                "; ".join(formatted),
                errors=formatted,
            )

    @staticmethod
    def _format_error(error: jsonschema.ValidationError) -> str:
        location = "/".join(str(part) for part in error.path) or "<root>"
        return f"{location}: {error.message}"
