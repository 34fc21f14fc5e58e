# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

"""Data models for the program state document and run results."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class TickerModel(BaseModel):
    """The calculator's auto-advance control.

    Attributes:
        playing: Whether the ticker re-evaluates the program on its own.
    """

    model_config = ConfigDict(extra="allow")

    playing: StrictBool = False


class ExpressionModel(BaseModel):
    """A single calculator expression. Only `latex` is inspected by the driver."""

    model_config = ConfigDict(extra="allow")

    latex: StrictStr | None = None


class ExpressionsModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    ticker: TickerModel
    expression_list: List[ExpressionModel] = Field(alias="list")


class ProgramStateModel(BaseModel):
    """Schema of a serialized calculator state accepted by `Calc.setState`.

    Used for validation only. The driver keeps working on the raw document so that
    unknown fields and key order reach the calculator untouched.
    """

    model_config = ConfigDict(extra="allow")

    expressions: ExpressionsModel


class RunResult(BaseModel):
    """Represents the outcome of one program run.

    Attributes:
        stdout: Bytes taken from the stdout accumulator when the run flag reached zero.
        execution_duration: Seconds between loading the state and observing the halt.
    """

    stdout: bytes
    execution_duration: float
