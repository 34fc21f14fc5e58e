# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

"""Completion & output bridge.

Turns the calculator's observer callbacks into a single-resolution halt future and
keeps the latest stdout accumulator value in a snapshot cell on the page.
"""

import asyncio
from typing import Any, Sequence
from uuid import uuid4

from loguru import logger
from playwright.async_api import Page

from coreason_desmos.config import VariableNames
from coreason_desmos.exceptions import OutputDecodeError

RUNNING_BINDING = "__coreasonDesmosRunning"
STDOUT_SNAPSHOT = "__coreasonDesmosStdout"

INSTALL_OBSERVERS_JS = """
([runningName, stdoutName, bindingName, snapshotName]) => {
  window[snapshotName] = null;
  const running = window.Calc.HelperExpression({ latex: runningName });
  running.observe("numericValue", () => {
    window[bindingName](running.numericValue);
  });
  const stdout = window.Calc.HelperExpression({ latex: stdoutName });
  stdout.observe("listValue", () => {
    window[snapshotName] = stdout.listValue;
  });
  window[bindingName + "Helpers"] = [running, stdout];
}
"""


def decode_stdout(values: Sequence[Any] | None) -> bytes:
    """Convert a stdout accumulator snapshot into bytes.

    Args:
        values: The accumulator's list value, or None if it was never observed.

    Returns:
        bytes: One byte per list element.

    Raises:
        OutputDecodeError: If an element is not an integer in [0, 255].
    """
    if values is None:
        logger.warning("Stdout accumulator was never observed, assuming empty output")
        return b""

    output = bytearray()
    for index, value in enumerate(values):
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not float(value).is_integer()
            or not 0 <= value <= 255
        ):
            raise OutputDecodeError(f"Stdout element {index} is not a byte: {value!r}")
        output.append(int(value))
    return bytes(output)


class CompletionBridge:
    """Waits for the run flag to reach zero and collects the program's output.

    One bridge serves exactly one run on one page. `install` must be awaited before
    the state is loaded so the first ticks are not missed.
    """

    def __init__(self, variables: VariableNames | None = None):
        self.variables = variables or VariableNames()
        # Page bindings cannot be re-registered, so every bridge gets its own names
        suffix = uuid4().hex
        self.binding_name = f"{RUNNING_BINDING}_{suffix}"
        self.snapshot_name = f"{STDOUT_SNAPSHOT}_{suffix}"
        self._halted: asyncio.Future[None] | None = None
        self.last_running_value: float | None = None

    def _halt_future(self) -> asyncio.Future[None]:
        if self._halted is None:
            self._halted = asyncio.get_running_loop().create_future()
        return self._halted

    @property
    def halted(self) -> bool:
        return self._halted is not None and self._halted.done()

    async def install(self, page: Page) -> None:
        """Attach the run flag and stdout observers to the calculator on `page`."""
        self._halt_future()
        await page.expose_function(self.binding_name, self.on_running_value)
        await page.evaluate(
            INSTALL_OBSERVERS_JS,
            [self.variables.running, self.variables.stdout, self.binding_name, self.snapshot_name],
        )
        logger.debug(f"Observers installed on {self.variables.running} and {self.variables.stdout}")

    def on_running_value(self, value: float | None) -> None:
        """Observer for the run flag. Resolves the halt future on the first zero."""
        self.last_running_value = value
        if value == 0 and not self._halt_future().done():
            logger.info(f"Run flag {self.variables.running} reached 0")
            self._halt_future().set_result(None)

    async def wait_for_halt(self) -> None:
        """Suspend until the run flag reaches zero. Waits forever if it never does."""
        await asyncio.shield(self._halt_future())

    async def read_output(self, page: Page) -> bytes:
        """Read the last stdout snapshot recorded on `page` and decode it."""
        values = await page.evaluate("(name) => window[name] ?? null", self.snapshot_name)
        output = decode_stdout(values)
        logger.debug(f"Read {len(output)} stdout bytes from {self.variables.stdout}")
        return output
