"""Pydantic configuration schemas for the phytomon pipeline.

This module provides strictly typed configuration models for the
consolidation pipeline. All configuration validation, coercion, and
normalization happens at schema validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from phytomon.schemas.resolve import resolve_config
from phytomon.schemas.internal import InternalConfig
from phytomon.schemas.param import ParamConfig
from phytomon.schemas.user import UserConfig
from phytomon.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
