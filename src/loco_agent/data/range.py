"""Integer range parameter data."""

from collections.abc import Iterator
from typing import Any, Literal, Self

import structlog
from pydantic import Field, model_validator

from loco_agent.balancing import even_bounds

from .base import ParameterDataConfig

logger = structlog.get_logger(__name__)

#: Default inclusive upper bound of a range.
RANGE_UPPER_LIMIT = 2**31 - 1

#: Token replaced by the current number in range templates.
RANGE_TOKEN = '{0}'


class RangeDataConfig(ParameterDataConfig):
    """Consecutive integers, optionally rendered through a string template.

    With a template such as `user{0}` the range produces `user10`,
    `user11` and so on; without one it produces the integers themselves.
    """

    kind: Literal['range'] = 'range'

    start: int = Field(
        title='Range start',
        description='First value of the range, inclusive.',
    )

    end: int = Field(
        default=RANGE_UPPER_LIMIT,
        title='Range end',
        description='Last value of the range, inclusive.',
    )

    template: str | None = Field(
        default=None,
        title='Value template',
        description=f'String template where `{RANGE_TOKEN}` is replaced by the current number.',
        examples=[
            'user{0}',
            'file_{0}.txt',
        ],
    )

    @model_validator(mode='before')
    @classmethod
    def normalize_bounds(cls, data: Any) -> Any:  # noqa: ANN401
        """Swap reversed range bounds, logging a warning."""
        if not isinstance(data, dict):
            return data

        start = data.get('start')
        end = data.get('end', RANGE_UPPER_LIMIT)
        if not isinstance(start, int) or not isinstance(end, int) or start <= end:
            return data

        logger.warning(
            'swapping range bounds',
            parameter=data.get('parameter_name'),
            start=start,
            end=end,
        )

        return {**data, 'start': end, 'end': start}

    @property
    def size(self) -> int:
        """Number of values in the range."""
        return self.end - self.start + 1

    def values(self) -> Iterator[int | str]:
        """Iterate the produced values in order."""
        for number in range(self.start, self.end + 1):
            if self.template is None:
                yield number
            else:
                yield self.template.replace(RANGE_TOKEN, str(number))

    def distribute(self, host_count: int) -> list[Self]:
        """Split the range into contiguous sub-ranges.

        Sub-range sizes differ by at most one, larger ones last, and the
        sub-ranges leave no gaps: `10..20` across 3 hosts is `10..12`,
        `13..16` and `17..20`.

        Raises:
            InvalidConfiguration: If `host_count` is less than one or the
                range has fewer values than hosts.
        """
        self.check_host_count(host_count)

        if self.size < host_count:
            raise self.invalid(
                f'Could not distribute only {self.size} values of parameter '
                f'{self.parameter_name!r} to {host_count} hosts',
            )

        return [
            self.model_copy(update={
                'start': self.start + lower,
                'end': self.start + upper - 1,
            })
            for lower, upper in even_bounds(self.size, host_count)
        ]
