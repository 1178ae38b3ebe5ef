"""Base Pydantic models and runtime settings.

This module defines the foundational model classes used by every value
object of the agent: signatures, threading patterns, parameter data
configurations and load plans. It enforces immutability and strict schema
validation so that a workload description handed to a remote agent is
exactly the one the test author built.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

type LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class SchemaModel(BaseModel):
    """Base immutable model for all agent value objects.

    Design principles enforced by this model:
        - Immutability: a pattern or a data configuration cannot be modified
          after creation. Distribution always produces new instances, so the
          parts sent to different hosts never share mutable state.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in load plans.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for agent runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored, so
          the surrounding environment may contain unrelated variables.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )


class AgentSettings(SettingsModel):
    """Agent settings resolved from `LOCO_AGENT_*` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix='LOCO_AGENT_',
        frozen=True,
        extra='ignore',
    )

    strict: bool = Field(
        default=True,
        title='Strict registration',
        description=(
            'Raise on duplicate action signatures and component loading '
            'failures instead of logging them and continuing.'
        ),
    )

    log_level: LogLevel = Field(
        default='INFO',
        title='Log level',
        description='Minimal level of emitted log events.',
    )

    log_json: bool = Field(
        default=False,
        title='JSON logs',
        description='Render log events as JSON lines instead of console output.',
    )
