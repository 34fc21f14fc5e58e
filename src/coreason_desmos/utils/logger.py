# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

"""Loguru sink configuration.

Importing this module resets loguru to a stderr sink and, when
COREASON_DESMOS_LOG_FILE is set, a JSON file sink. Stdout is never used since it
carries the program's output.
"""

import os
import sys
from pathlib import Path

from loguru import logger

LOG_LEVEL = os.getenv("COREASON_DESMOS_LOG_LEVEL", "WARNING").upper()
LOG_FILE = os.getenv("COREASON_DESMOS_LOG_FILE")

logger.remove()
logger.add(
    sys.stderr,
    level=LOG_LEVEL,
    format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | {name}:{line} - {message}",
)

if LOG_FILE:
    Path(LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        LOG_FILE,
        level="DEBUG",
        serialize=True,
        rotation="10 MB",
        retention="7 days",
        enqueue=True,
    )

__all__ = ["logger"]
