"""Parameter data of one load queue."""

from typing import Annotated, Self

from pydantic import Field, model_validator

from loco_agent.errors import ErrorContext, InvalidConfiguration
from loco_agent.models import SchemaModel

from .files import FileNamesDataConfig
from .listing import ListDataConfig
from .range import RangeDataConfig

AnyParameterDataConfig = Annotated[
    RangeDataConfig
    | ListDataConfig
    | FileNamesDataConfig,
    Field(discriminator='kind'),
]


class LoaderDataConfig(SchemaModel):
    """Ordered parameter data configurations, at most one per parameter."""

    configs: tuple[AnyParameterDataConfig, ...] = Field(
        default_factory=tuple,
        title='Parameter data configurations',
        description='Configurations in declaration order.',
    )

    @model_validator(mode='after')
    def check_unique_parameters(self) -> Self:
        """Reject several configurations for one parameter.

        Raises:
            InvalidConfiguration: On a duplicate parameter name.
        """
        seen: set[str] = set()
        for config in self.configs:
            if config.parameter_name in seen:
                raise InvalidConfiguration(
                    f'Parameter {config.parameter_name!r} is configured more than once',
                    context=ErrorContext(element=config.model_dump(mode='json')),
                )
            seen.add(config.parameter_name)

        return self

    @property
    def parameter_names(self) -> list[str]:
        """Configured parameter names in declaration order."""
        return [config.parameter_name for config in self.configs]

    def get(self, parameter_name: str) -> RangeDataConfig | ListDataConfig | FileNamesDataConfig | None:
        """Return the configuration of a parameter, if any."""
        return next(
            (config for config in self.configs if config.parameter_name == parameter_name),
            None,
        )

    def distribute(self, host_count: int) -> list[Self]:
        """Distribute every configuration and zip the parts by host.

        Args:
            host_count: Number of hosts.

        Returns:
            Exactly `host_count` loader configurations in host order.

        Raises:
            InvalidConfiguration: If any configuration can not be split
                across that many hosts.
        """
        if host_count < 1:
            raise InvalidConfiguration(f'Can not distribute parameter data across {host_count} hosts')

        parts = [config.distribute(host_count) for config in self.configs]

        return [
            type(self)(configs=[part[index] for part in parts])
            for index in range(host_count)
        ]

    def __len__(self) -> int:
        """Number of configured parameters."""
        return len(self.configs)
