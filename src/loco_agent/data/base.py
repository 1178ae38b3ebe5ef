"""Parameter data configuration base model.

A parameter data configuration tells load threads which values to feed
into one named action parameter. Like threading patterns, data
configurations are immutable and split across hosts by `distribute`.
"""

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Self

from pydantic import Field

from loco_agent.errors import ErrorContext, InvalidConfiguration
from loco_agent.models import SchemaModel
from loco_agent.names import ParameterName

type DataValue = str | int | float | bool | None


class ProviderLevel(StrEnum):
    """Level at which a new parameter value is taken."""

    #: Each thread takes one value and keeps it for all iterations.
    PER_THREAD_STATIC = 'per_thread_static'
    #: Each thread takes a new value on every iteration.
    PER_THREAD = 'per_thread'
    #: Every invocation takes the next value, regardless of the thread.
    PER_INVOCATION = 'per_invocation'


class ParameterDataConfig(SchemaModel, ABC):
    """Base parameter data configuration."""

    kind: str = Field(
        title='Configuration tag',
        description='Discriminator identifying the configuration variant.',
    )

    parameter_name: ParameterName = Field(
        title='Parameter name',
        description='Name of the action parameter fed with the values.',
    )

    provider_level: ProviderLevel = Field(
        default=ProviderLevel.PER_THREAD_STATIC,
        title='Provider level',
        description='Level at which a new value is taken.',
    )

    def invalid(self, message: str) -> InvalidConfiguration:
        """Build a configuration error for this configuration."""
        return InvalidConfiguration(
            message,
            context=ErrorContext(element=self.model_dump(mode='json')),
        )

    def check_host_count(self, host_count: int) -> None:
        """Reject host counts below one.

        Raises:
            InvalidConfiguration: If `host_count` is less than one.
        """
        if host_count < 1:
            raise self.invalid(
                f'Can not distribute parameter {self.parameter_name!r} '
                f'across {host_count} hosts',
            )

    @abstractmethod
    def distribute(self, host_count: int) -> list[Self]:
        """Split the configuration across hosts.

        Args:
            host_count: Number of hosts.

        Returns:
            Exactly `host_count` configurations in host order.

        Raises:
            InvalidConfiguration: If the values can not be split across
                that many hosts.
        """
