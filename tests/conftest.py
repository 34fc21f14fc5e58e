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
import json
from pathlib import Path
from typing import Any, Generator, Sequence
from unittest.mock import patch

import pytest

from coreason_desmos.bridge import INSTALL_OBSERVERS_JS
from coreason_desmos.config import VariableNames
from coreason_desmos.injector import decode_stdin_latex
from coreason_desmos.runtime import SandboxRuntime

STDIN_PLACEHOLDER = r"s_{tdin}=\left[\right]"


class FakeCalculatorPage:
    """Stands in for a Playwright page running the calculator.

    Once the state is loaded it publishes `stdout` into the snapshot cell and reports
    each of `running_values` through the exposed run flag binding. With `echo=True`
    the stdout value is the injected stdin list, like a cat program.
    """

    def __init__(
        self,
        stdout: Sequence[Any] | None = None,
        running_values: Sequence[Any] = (0,),
        echo: bool = False,
    ):
        self.stdout = stdout
        self.running_values = running_values
        self.echo = echo
        self.bindings: dict[str, Any] = {}
        self.window: dict[str, Any] = {}
        self.installed: list[str] | None = None
        self.loaded_state: dict[str, Any] | None = None
        self.events: list[str] = []

    async def expose_function(self, name: str, callback: Any) -> None:
        if name in self.bindings:
            raise RuntimeError(f"Function \"{name}\" has been already registered")
        self.bindings[name] = callback
        self.events.append("expose")

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == INSTALL_OBSERVERS_JS:
            self.installed = arg
            self.window[arg[3]] = None
            self.events.append("observe")
            return None
        if "setState" in script:
            self.loaded_state = arg
            self.events.append("setState")
            asyncio.get_running_loop().call_soon(self._tick)
            return None
        if "window[name]" in script:
            return self.window.get(arg)
        raise AssertionError(f"Unexpected script: {script}")

    def _tick(self) -> None:
        assert self.installed is not None
        _, _, binding, snapshot = self.installed
        if self.echo:
            assert self.loaded_state is not None
            variables = VariableNames()
            stdin = next(
                e["latex"]
                for e in self.loaded_state["expressions"]["list"]
                if e.get("latex", "").startswith(variables.stdin + "=")
            )
            self.window[snapshot] = [float(b) for b in decode_stdin_latex(stdin, variables)]
        elif self.stdout is not None:
            self.window[snapshot] = list(self.stdout)
        for value in self.running_values:
            self.bindings[binding](value)


class FakeRuntime(SandboxRuntime):
    def __init__(self, page: FakeCalculatorPage | None = None, start_error: Exception | None = None):
        self._fake_page = page or FakeCalculatorPage()
        self.start_error = start_error
        self.started = False
        self.start_calls = 0
        self.terminate_calls = 0

    @property
    def page(self) -> Any:
        if not self.started:
            raise RuntimeError("Sandbox not started")
        return self._fake_page

    async def start(self) -> None:
        self.start_calls += 1
        if self.start_error:
            raise self.start_error
        self.started = True

    async def load_state(self, state: dict[str, Any]) -> None:
        await self.page.evaluate("(state) => window.Calc.setState(state)", state)

    async def terminate(self) -> None:
        self.terminate_calls += 1
        self.started = False


@pytest.fixture
def sample_state() -> dict[str, Any]:
    """A state shaped like the compiler's output."""
    return {
        "version": 8,
        "expressions": {
            "list": [
                {"type": "expression", "id": "1", "latex": r"m_{em0}=\left[0,0,0\right]"},
                {"type": "expression", "id": "2", "latex": STDIN_PLACEHOLDER},
                {"type": "expression", "id": "3", "latex": r"s_{tdout}=\left[\right]"},
                {"type": "expression", "id": "4", "latex": "r=1"},
                {"type": "text", "id": "5", "text": "generated"},
            ],
            "ticker": {"handlerLatex": r"r\to0", "open": True, "playing": False},
        },
    }


@pytest.fixture
def state_file(tmp_path: Path, sample_state: dict[str, Any]) -> Path:
    path = tmp_path / "program.json"
    path.write_text(json.dumps(sample_state))
    return path


@pytest.fixture
def fake_page() -> FakeCalculatorPage:
    return FakeCalculatorPage(stdout=[72.0, 105.0])


@pytest.fixture
def fake_runtime(fake_page: FakeCalculatorPage) -> FakeRuntime:
    return FakeRuntime(fake_page)


@pytest.fixture
def patched_build_runtime(fake_runtime: FakeRuntime) -> Generator[Any, None, None]:
    with patch("coreason_desmos.driver.build_runtime", return_value=fake_runtime) as mock:
        yield mock
