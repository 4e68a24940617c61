"""Validate raw JSON payloads against pydantic contracts."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from agentflow.errors import SchemaMismatch

ModelT = TypeVar("ModelT", bound=BaseModel)


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Flatten a pydantic ValidationError into ``{field path: [messages]}``.

    Input values are deliberately left out so nothing from the payload is
    echoed back. Errors on the payload root are keyed under ``_root``.
    """
    errors: dict[str, list[str]] = {}
    for err in exc.errors(include_input=False, include_url=False):
        path = ".".join(str(part) for part in err["loc"]) or "_root"
        errors.setdefault(path, []).append(err["msg"])
    return errors


def validate(
    raw: Any,
    contract: type[ModelT],
    message: str = "Payload does not match the expected structure.",
) -> ModelT:
    """Validate *raw* against *contract* or raise ``SchemaMismatch``."""
    try:
        return contract.model_validate(raw)
    except ValidationError as exc:
        raise SchemaMismatch(message, field_errors(exc)) from exc
