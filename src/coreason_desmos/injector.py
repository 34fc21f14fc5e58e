# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

from typing import Any

from loguru import logger

from coreason_desmos.config import VariableNames
from coreason_desmos.exceptions import (
    DuplicateStdinPlaceholderError,
    MalformedStateError,
    StdinPlaceholderNotFoundError,
)


def encode_stdin(data: bytes) -> str:
    """Encode bytes as the comma-separated decimal body of a calculator list."""
    return ",".join(str(b) for b in data)


def decode_stdin_latex(latex: str, variables: VariableNames) -> bytes:
    """Recover the bytes from a patched stdin expression.

    Raises:
        MalformedStateError: If the expression is not a stdin assignment of byte values.
    """
    prefix, suffix = variables.stdin_placeholder.split(r"\left[\right]")
    prefix += r"\left["
    suffix = r"\right]" + suffix
    if not (latex.startswith(prefix) and latex.endswith(suffix)):
        raise MalformedStateError(f"Not a {variables.stdin} assignment: {latex!r}")

    body = latex[len(prefix) : len(latex) - len(suffix)]
    if not body:
        return b""
    try:
        return bytes(int(token) for token in body.split(","))
    except ValueError as e:
        raise MalformedStateError(f"Invalid byte list in {variables.stdin}: {e}") from e


def inject_stdin(state: dict[str, Any], data: bytes, variables: VariableNames | None = None) -> dict[str, Any]:
    """Patch input bytes into a program state and enable its ticker.

    The input document is left untouched; only the containers on the path to the
    patched values are copied, every other expression is carried over as is.

    Args:
        state: A document returned by the state loader.
        data: The bytes to feed the program's stdin.
        variables: Reserved variable names agreed with the compiler.

    Returns:
        dict[str, Any]: The patched document, ready for `Calc.setState`.

    Raises:
        StdinPlaceholderNotFoundError: If no expression matches the empty stdin placeholder.
        DuplicateStdinPlaceholderError: If more than one expression matches it.
    """
    variables = variables or VariableNames()
    placeholder = variables.stdin_placeholder
    patched_latex = variables.stdin_latex(encode_stdin(data))

    expressions = state["expressions"]
    patched_list = []
    matches = 0
    for expression in expressions["list"]:
        if expression.get("latex") == placeholder:
            matches += 1
            expression = {**expression, "latex": patched_latex}
        patched_list.append(expression)

    if matches == 0:
        raise StdinPlaceholderNotFoundError(
            f"Unable to find stdin variable {placeholder!r}. "
            "Check that the reserved variable names match the compiler's."
        )
    if matches > 1:
        raise DuplicateStdinPlaceholderError(f"Stdin variable {placeholder!r} is defined {matches} times")

    logger.debug(f"Injected {len(data)} stdin bytes into {variables.stdin}")
    return {
        **state,
        "expressions": {
            **expressions,
            "ticker": {**expressions["ticker"], "playing": True},
            "list": patched_list,
        },
    }
