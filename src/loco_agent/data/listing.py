"""Explicit list parameter data."""

from typing import Literal, Self

from pydantic import Field

from loco_agent.balancing import even_bounds

from .base import DataValue, ParameterDataConfig


class ListDataConfig(ParameterDataConfig):
    """An ordered list of explicit values."""

    kind: Literal['list'] = 'list'

    values: tuple[DataValue, ...] = Field(
        min_length=1,
        title='Values',
        description='Values fed to the parameter, in order.',
    )

    def distribute(self, host_count: int) -> list[Self]:
        """Split the values into contiguous, order-preserving chunks.

        Chunk sizes differ by at most one, larger ones last: five values
        across two hosts are split as two and three.

        Raises:
            InvalidConfiguration: If `host_count` is less than one or there
                are fewer values than hosts.
        """
        self.check_host_count(host_count)

        if len(self.values) < host_count:
            raise self.invalid(
                f'Could not distribute only {len(self.values)} values of '
                f'parameter {self.parameter_name!r} to {host_count} hosts',
            )

        return [
            self.model_copy(update={'values': self.values[lower:upper]})
            for lower, upper in even_bounds(len(self.values), host_count)
        ]
