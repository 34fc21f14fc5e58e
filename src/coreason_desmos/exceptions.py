# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

"""Error taxonomy for the Desmos driver.

Every error is fatal: the CLI reports it once on stderr and exits with status 1.
"""


class DriverError(Exception):
    """Base class for all errors raised by the driver."""


class InvalidArgumentError(DriverError, ValueError):
    """A required input (e.g. the state document path) was not supplied or cannot be read."""


class MalformedStateError(DriverError, ValueError):
    """The program state document failed structural validation."""


class DuplicateStdinPlaceholderError(MalformedStateError):
    """The stdin placeholder expression appears more than once in the document."""


class StdinPlaceholderNotFoundError(DriverError, LookupError):
    """The document does not expose the stdin placeholder expression.

    This points at a mismatch between the reserved variable names configured here
    and the ones used by the compiler that produced the document.
    """


class SandboxLaunchError(DriverError, RuntimeError):
    """The browser could not be started or the calculator page did not become ready."""


class UnhandledEvaluationError(DriverError, RuntimeError):
    """An error surfaced while the program was running inside the calculator."""


class OutputDecodeError(UnhandledEvaluationError):
    """The stdout accumulator held a value that is not a byte."""


class ExecutionTimeoutError(UnhandledEvaluationError):
    """The run flag did not reach zero before the configured deadline."""
