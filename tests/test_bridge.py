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
import math
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from coreason_desmos.bridge import (
    INSTALL_OBSERVERS_JS,
    RUNNING_BINDING,
    STDOUT_SNAPSHOT,
    CompletionBridge,
    decode_stdout,
)
from coreason_desmos.config import VariableNames
from coreason_desmos.exceptions import OutputDecodeError


def test_decode_stdout() -> None:
    assert decode_stdout([72.0, 105.0]) == b"Hi"
    assert decode_stdout([0, 255]) == b"\x00\xff"
    assert decode_stdout([]) == b""


def test_decode_stdout_never_observed() -> None:
    assert decode_stdout(None) == b""


@pytest.mark.parametrize("value", [256, -1, 1.5, math.nan, "72", None, True])
def test_decode_stdout_rejects_non_bytes(value: Any) -> None:
    with pytest.raises(OutputDecodeError, match="element 1"):
        decode_stdout([65, value])


@pytest.mark.asyncio
async def test_install_registers_observers() -> None:
    page = MagicMock()
    page.expose_function = AsyncMock()
    page.evaluate = AsyncMock()
    bridge = CompletionBridge(VariableNames(running="h_{alt}", stdout="o_{ut}"))

    await bridge.install(page)

    page.expose_function.assert_awaited_once_with(bridge.binding_name, bridge.on_running_value)
    page.evaluate.assert_awaited_once_with(
        INSTALL_OBSERVERS_JS, ["h_{alt}", "o_{ut}", bridge.binding_name, bridge.snapshot_name]
    )
    assert not bridge.halted


@pytest.mark.asyncio
async def test_halts_on_first_zero() -> None:
    bridge = CompletionBridge()
    bridge.on_running_value(1)
    assert not bridge.halted

    bridge.on_running_value(0)
    await asyncio.wait_for(bridge.wait_for_halt(), timeout=1)

    assert bridge.halted
    assert bridge.last_running_value == 0


@pytest.mark.asyncio
async def test_repeated_zero_is_a_no_op() -> None:
    bridge = CompletionBridge()
    bridge.on_running_value(0)
    bridge.on_running_value(0.0)
    bridge.on_running_value(1)
    await bridge.wait_for_halt()
    assert bridge.halted
    assert bridge.last_running_value == 1


@pytest.mark.asyncio
async def test_non_zero_values_keep_waiting() -> None:
    bridge = CompletionBridge()
    for value in (1, 2.5, -1, math.nan, None):
        bridge.on_running_value(value)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(bridge.wait_for_halt(), timeout=0.05)

    # A cancelled wait does not poison the halt signal
    assert not bridge.halted
    bridge.on_running_value(0)
    await asyncio.wait_for(bridge.wait_for_halt(), timeout=1)


@pytest.mark.asyncio
async def test_read_output_uses_snapshot() -> None:
    page = MagicMock()
    page.evaluate = AsyncMock(return_value=[72.0, 105.0])
    bridge = CompletionBridge()

    output = await bridge.read_output(page)

    assert output == b"Hi"
    page.evaluate.assert_awaited_once_with("(name) => window[name] ?? null", bridge.snapshot_name)


@pytest.mark.asyncio
async def test_bridge_with_fake_calculator(fake_page: Any) -> None:
    bridge = CompletionBridge()
    await bridge.install(fake_page)
    await fake_page.evaluate("(state) => window.Calc.setState(state)", {})

    await asyncio.wait_for(bridge.wait_for_halt(), timeout=1)

    assert await bridge.read_output(fake_page) == b"Hi"
    assert fake_page.events == ["expose", "observe", "setState"]


def test_bridges_use_distinct_page_names() -> None:
    """
    GIVEN two bridges for consecutive runs on the same page
    WHEN their page names are compared
    THEN neither the binding nor the snapshot cell is shared.
    """
    first, second = CompletionBridge(), CompletionBridge()
    assert first.binding_name.startswith(RUNNING_BINDING)
    assert first.snapshot_name.startswith(STDOUT_SNAPSHOT)
    assert first.binding_name != second.binding_name
    assert first.snapshot_name != second.snapshot_name
