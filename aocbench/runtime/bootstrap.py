# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
One-time setup before a command does any real work.

  1. check the Python version
  2. apply the configured log level (and log file) to every aocbench logger
  3. log what the machine looks like, including which toolchains are on PATH
"""

from pathlib import Path
from typing import Optional

from aocbench.config.schema import GlobalConfig
from aocbench.logging.logger import get_logger, set_log_level
from aocbench.runtime.environment import check_minimum_python, get_system_info


def bootstrap(config: Optional[GlobalConfig] = None, log_level: Optional[str] = None) -> None:
    """
    Args:
        config: The validated global config, if one was given.
        log_level: Overrides the config's level (the --log-level flag).
    """
    check_minimum_python()

    level = log_level or (config.log_level if config is not None else "INFO")
    log_file = Path(config.log_file) if config is not None and config.log_file else None
    set_log_level(level, log_file)

    logger = get_logger("aocbench.runtime", log_level=level)
    system_info = get_system_info()
    logger.debug(
        "Bootstrap complete",
        extra={
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "tools": system_info.tools,
        },
    )
