# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from coreason_desmos.exceptions import InvalidArgumentError, MalformedStateError
from coreason_desmos.models import ProgramStateModel


def validate_state(document: Any) -> dict[str, Any]:
    """Check that an already decoded document has a valid ticker and expression list.

    Returns:
        dict[str, Any]: The same document, untouched.

    Raises:
        MalformedStateError: If the document fails validation.
    """
    try:
        ProgramStateModel.model_validate(document)
    except ValidationError as e:
        raise MalformedStateError(f"Invalid state detected: {e}") from e

    return document  # type: ignore[no-any-return]


def parse_state(raw: str | bytes) -> dict[str, Any]:
    """Decode and validate a serialized program state document.

    Args:
        raw: The JSON text of the document.

    Returns:
        dict[str, Any]: The document as parsed, with key order preserved.

    Raises:
        MalformedStateError: If the text is not JSON or lacks a valid ticker/expression list.
    """
    try:
        document = json.loads(raw)
    except ValueError as e:
        raise MalformedStateError(f"State document is not valid JSON: {e}") from e

    return validate_state(document)


def load_state(path: str | Path | None) -> dict[str, Any]:
    """Read a program state document from disk.

    Args:
        path: Location of the JSON document.

    Returns:
        dict[str, Any]: The validated document.

    Raises:
        InvalidArgumentError: If no path is given or the file cannot be read.
        MalformedStateError: If the document fails validation.
    """
    if not path:
        raise InvalidArgumentError("A program state document path is required")

    state_path = Path(path)
    try:
        raw = state_path.read_bytes()
    except OSError as e:
        raise InvalidArgumentError(f"Unable to read state document {state_path}: {e}") from e

    logger.debug(f"Loaded state document {state_path} ({len(raw)} bytes)")
    return parse_state(raw)
