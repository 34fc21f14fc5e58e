# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

import asyncio
import time
from pathlib import Path
from typing import Any
from uuid import uuid4

import anyio
from loguru import logger

from coreason_desmos.bridge import CompletionBridge
from coreason_desmos.config import DriverConfig
from coreason_desmos.exceptions import DriverError, ExecutionTimeoutError, UnhandledEvaluationError
from coreason_desmos.injector import inject_stdin
from coreason_desmos.loader import load_state, validate_state
from coreason_desmos.models import RunResult
from coreason_desmos.runtime import SandboxRuntime
from coreason_desmos.runtimes.browser import BrowserRuntime


def build_runtime(config: DriverConfig) -> SandboxRuntime:
    """Returns the browser runtime described by `config`."""
    return BrowserRuntime(
        executable_path=config.chrome_executable_path,
        headless=config.headless,
        browser_type=config.browser_type,
        calculator_url=config.calculator_url,
        navigation_timeout_ms=config.navigation_timeout_ms,
    )


class DesmosDriverAsync:
    """Async-native Desmos driver (The Core).

    Owns one sandbox for its lifetime: entering the context starts it, leaving the
    context always tears it down.
    """

    def __init__(
        self,
        config: DriverConfig | None = None,
        runtime: SandboxRuntime | None = None,
    ):
        """Initializes the driver.

        Args:
            config: Configuration for the driver.
            runtime: Optional runtime to use instead of the configured browser.
        """
        self.config = config or DriverConfig()
        self.runtime: SandboxRuntime = runtime or build_runtime(self.config)
        self.run_id = str(uuid4())

    async def __aenter__(self) -> "DesmosDriverAsync":
        """Starts the sandbox environment."""
        await self.runtime.start()
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Terminates the sandbox environment and cleans up resources."""
        await self.runtime.terminate()

    async def run(self, state: dict[str, Any], data: bytes) -> RunResult:
        """Injects `data` into `state` and executes it.

        Args:
            state: A program state document as returned by the loader.
            data: Bytes for the program's stdin.

        Returns:
            RunResult: The program's output.
        """
        patched = inject_stdin(validate_state(state), data, self.config.variables)
        return await self.execute(patched)

    async def execute(self, state: dict[str, Any]) -> RunResult:
        """Executes an already patched state until the run flag reaches zero.

        Args:
            state: A state with stdin injected and the ticker playing.

        Returns:
            RunResult: The program's output.

        Raises:
            ExecutionTimeoutError: If `execution_timeout` is set and expires first.
            UnhandledEvaluationError: If anything else fails while the program runs.
        """
        logger.info("Executing program in calculator", run_id=self.run_id)
        bridge = CompletionBridge(self.config.variables)
        try:
            page = self.runtime.page
            await bridge.install(page)
            start = time.perf_counter()
            await self.runtime.load_state(state)
            try:
                await asyncio.wait_for(bridge.wait_for_halt(), timeout=self.config.execution_timeout)
            except asyncio.TimeoutError as e:
                raise ExecutionTimeoutError(
                    f"Run flag {self.config.variables.running} did not reach 0 "
                    f"within {self.config.execution_timeout}s"
                ) from e
            duration = time.perf_counter() - start
            stdout = await bridge.read_output(page)
        except DriverError:
            raise
        except Exception as e:
            logger.exception(f"Unhandled error while executing program: {e}")
            raise UnhandledEvaluationError(f"Unhandled error while executing program: {e}") from e

        logger.info(f"Program halted after {duration:.3f}s with {len(stdout)} output bytes", run_id=self.run_id)
        return RunResult(stdout=stdout, execution_duration=duration)


async def run_program(
    state: dict[str, Any] | str | Path,
    data: bytes,
    config: DriverConfig | None = None,
    runtime: SandboxRuntime | None = None,
) -> RunResult:
    """Loads, patches and runs a program in a fresh sandbox.

    Loading and injection happen before the sandbox is created, so document errors
    never launch a browser.

    Args:
        state: A parsed state document or the path to one.
        data: Bytes for the program's stdin.
        config: Configuration for the driver.
        runtime: Optional runtime to use instead of the configured browser.

    Returns:
        RunResult: The program's output.
    """
    config = config or DriverConfig()
    if isinstance(state, dict):
        state = validate_state(state)
    else:
        state = load_state(state)
    patched = inject_stdin(state, data, config.variables)
    async with DesmosDriverAsync(config, runtime) as driver:
        return await driver.execute(patched)


class DesmosDriver:
    """Sync Facade for the async driver (The Facade).

    Every call runs a complete program in its own event loop via anyio.run.
    """

    def __init__(self, config: DriverConfig | None = None):
        """Initializes the facade.

        Args:
            config: Configuration for the driver.
        """
        self.config = config or DriverConfig()

    def run(self, state: dict[str, Any] | str | Path, data: bytes = b"") -> RunResult:
        """Runs a program synchronously.

        Args:
            state: A parsed state document or the path to one.
            data: Bytes for the program's stdin.

        Returns:
            RunResult: The program's output.
        """
        return anyio.run(run_program, state, data, self.config)
