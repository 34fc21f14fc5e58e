# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CALCULATOR_URL = "https://www.desmos.com/calculator?nographpaper&nozoomButtons"


class VariableNames(BaseModel):
    """Reserved calculator variables shared with the compiler that produced the state.

    Attributes:
        running: Run flag; the program has halted once it evaluates to 0.
        stdin: List variable the input bytes are written into.
        stdout: List variable the program accumulates output bytes in.
    """

    model_config = ConfigDict(frozen=True)

    running: str = "r"
    stdin: str = "s_{tdin}"
    stdout: str = "s_{tdout}"

    def stdin_latex(self, body: str) -> str:
        """Build the stdin assignment expression for an already encoded list body."""
        return rf"{self.stdin}=\left[{body}\right]"

    @property
    def stdin_placeholder(self) -> str:
        return self.stdin_latex("")


class DriverConfig(BaseSettings):
    """
    Configuration for the Desmos driver.
    """

    # Optional browser executable override, absent means Playwright's own discovery
    chrome_executable_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "chrome_executable_path", "COREASON_DESMOS_CHROME_EXECUTABLE_PATH", "CHROME_EXECUTABLE_PATH"
        ),
    )
    headless: bool = True
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    calculator_url: str = DEFAULT_CALCULATOR_URL
    navigation_timeout_ms: float = 60_000.0

    # None waits for the run flag forever
    execution_timeout: float | None = None

    variables: VariableNames = VariableNames()

    model_config = SettingsConfigDict(
        env_prefix="COREASON_DESMOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        populate_by_name=True,
        extra="ignore",
    )
