# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

from abc import ABC, abstractmethod
from typing import Any

from playwright.async_api import Page


class SandboxRuntime(ABC):
    """
    Abstract base class for the environment hosting the calculator.
    Follows the Strategy Pattern.
    """

    @abstractmethod
    async def start(self) -> None:
        """Boot the environment.

        Starts a fresh, isolated instance and waits until the calculator is ready.

        Raises:
            SandboxLaunchError: If the instance fails to start or become ready.
        """
        pass  # pragma: no cover

    @property
    @abstractmethod
    def page(self) -> Page:
        """The page hosting the calculator.

        Raises:
            RuntimeError: If the sandbox is not running.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def load_state(self, state: dict[str, Any]) -> None:
        """Replace the calculator's state.

        Args:
            state: A complete program state document.

        Raises:
            RuntimeError: If the sandbox is not running.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def terminate(self) -> None:
        """Kill and cleanup the sandbox environment.

        Releases every resource acquired by `start`. Never raises.
        """
        pass  # pragma: no cover
