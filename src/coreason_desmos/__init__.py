# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

"""
coreason-desmos
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .bridge import CompletionBridge, decode_stdout
from .config import DriverConfig, VariableNames
from .driver import DesmosDriver, DesmosDriverAsync, run_program
from .exceptions import (
    DriverError,
    DuplicateStdinPlaceholderError,
    ExecutionTimeoutError,
    InvalidArgumentError,
    MalformedStateError,
    OutputDecodeError,
    SandboxLaunchError,
    StdinPlaceholderNotFoundError,
    UnhandledEvaluationError,
)
from .injector import decode_stdin_latex, encode_stdin, inject_stdin
from .loader import load_state, parse_state, validate_state
from .models import RunResult
from .runtime import SandboxRuntime
from .runtimes.browser import BrowserRuntime

__all__ = [
    "BrowserRuntime",
    "CompletionBridge",
    "DesmosDriver",
    "DesmosDriverAsync",
    "DriverConfig",
    "DriverError",
    "DuplicateStdinPlaceholderError",
    "ExecutionTimeoutError",
    "InvalidArgumentError",
    "MalformedStateError",
    "OutputDecodeError",
    "RunResult",
    "SandboxLaunchError",
    "SandboxRuntime",
    "StdinPlaceholderNotFoundError",
    "UnhandledEvaluationError",
    "VariableNames",
    "decode_stdin_latex",
    "decode_stdout",
    "encode_stdin",
    "inject_stdin",
    "load_state",
    "parse_state",
    "run_program",
    "validate_state",
]
