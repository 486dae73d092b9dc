# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

Kept apart from the loaders so the CLI can catch config failures without
importing pydantic or yaml. Every one of these is fatal for a run: a broken
config file stops aocbench before any day is built.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a config file parses fine but fails schema validation.
    This covers missing required fields, type mismatches, unknown keys and
    regular expressions that don't compile.
    """


class TemplateError(ConfigError):
    """Raised when a toolchain command template uses an unknown key or prefix."""
