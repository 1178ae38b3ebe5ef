"""Threading pattern base model.

A threading pattern declares how many threads run an action queue and
how they iterate. Patterns are immutable; distributing a pattern across
hosts produces new sub-patterns whose aggregate reproduces the whole.
"""

from abc import ABC, abstractmethod
from typing import Any, Self

import structlog
from pydantic import Field, model_validator

from loco_agent.balancing import even_load
from loco_agent.errors import ErrorContext, InvalidConfiguration
from loco_agent.models import SchemaModel

logger = structlog.get_logger(__name__)

#: Upper bound of a queue pass rate, in percents.
MAX_PASS_RATE = 100


class ThreadingPattern(SchemaModel, ABC):
    """Base threading pattern.

    Subclasses add either an iteration count or a duration, and ramp-up
    timing where threads are started in steps.
    """

    pattern: str = Field(
        title='Pattern tag',
        description='Discriminator identifying the pattern variant.',
    )

    thread_count: int = Field(
        title='Thread count',
        description='Number of threads running the action queue.',
    )

    block_until_completion: bool = Field(
        default=True,
        title='Blocking flag',
        description='Whether submitting the load waits until all threads finish.',
    )

    interval_between_iterations: int = Field(
        default=0,
        title='Interval between iterations',
        description='Fixed pause between two iterations of a thread, in milliseconds.',
    )

    min_interval_between_iterations: int | None = Field(
        default=None,
        title='Minimal interval between iterations',
        description=(
            'Lower bound of a random pause between iterations, in milliseconds. '
            'Requires the upper bound and excludes the fixed interval.'
        ),
    )

    max_interval_between_iterations: int | None = Field(
        default=None,
        title='Maximal interval between iterations',
        description='Upper bound of a random pause between iterations, in milliseconds.',
    )

    iteration_timeout: int = Field(
        default=0,
        title='Iteration timeout',
        description='Maximal duration of one iteration in seconds; 0 means no limit.',
    )

    queue_pass_rate: int = Field(
        default=0,
        title='Queue pass rate',
        description='Percent of iterations that must pass for the queue to pass.',
    )

    time_frame: int = Field(
        default=0,
        title='Time frame',
        description='Length of the execution speed window in seconds; 0 disables the limit.',
    )

    executions_per_time_frame: int = Field(
        default=0,
        title='Executions per time frame',
        description='Maximal number of iterations of all threads in one time frame.',
    )

    total_thread_count: int | None = Field(
        default=None,
        title='Total thread count',
        description=(
            'Thread count of the whole workload. Set on patterns produced '
            'by distribution, where `thread_count` is the share of one host.'
        ),
    )

    @model_validator(mode='before')
    @classmethod
    def normalize_intervals(cls, data: Any) -> Any:  # noqa: ANN401
        """Normalize random interval bounds.

        Swapped bounds are put in order, equal bounds collapse into a
        fixed interval. Both cases are logged as warnings.

        Args:
            data: Raw model input.

        Returns:
            Normalized model input.
        """
        if not isinstance(data, dict):
            return data

        lower = data.get('min_interval_between_iterations')
        upper = data.get('max_interval_between_iterations')
        if not isinstance(lower, int) or not isinstance(upper, int):
            return data

        data = dict(data)
        if lower > upper:
            logger.warning(
                'swapping interval bounds',
                min_interval=lower,
                max_interval=upper,
            )
            data['min_interval_between_iterations'] = upper
            data['max_interval_between_iterations'] = lower

        elif lower == upper and not data.get('interval_between_iterations'):
            logger.warning(
                'equal interval bounds, using a fixed interval',
                interval=lower,
            )
            data['interval_between_iterations'] = lower
            data['min_interval_between_iterations'] = None
            data['max_interval_between_iterations'] = None

        return data

    @model_validator(mode='after')
    def check_threads(self) -> Self:
        """Check thread counts.

        Raises:
            InvalidConfiguration: If there are no threads, or the whole
                workload is smaller than this part of it.
        """
        if self.thread_count < 1:
            raise self.invalid(f'Thread count must be positive, got {self.thread_count}')

        if self.total_thread_count is not None and self.total_thread_count < self.thread_count:
            raise self.invalid(
                f'Total thread count {self.total_thread_count} is less '
                f'than the thread count {self.thread_count}',
            )

        return self

    @model_validator(mode='after')
    def check_intervals(self) -> Self:
        """Check the fixed and random iteration intervals.

        Raises:
            InvalidConfiguration: On negative intervals, a random interval
                bound without its pair, or a random interval combined with
                a fixed one.
        """
        lower = self.min_interval_between_iterations
        upper = self.max_interval_between_iterations

        if self.interval_between_iterations < 0:
            raise self.invalid('Interval between iterations must not be negative')

        if (lower is None) != (upper is None):
            raise self.invalid('Both minimal and maximal intervals between iterations are required')

        if lower is None:
            return self

        if lower < 0 or upper < 0:  # type: ignore[operator]
            raise self.invalid('Intervals between iterations must not be negative')

        if self.interval_between_iterations > 0:
            raise self.invalid('Specified both fixed and varying intervals between iterations')

        return self

    @model_validator(mode='after')
    def check_limits(self) -> Self:
        """Check timeout, pass rate and execution speed limits.

        Raises:
            InvalidConfiguration: If a limit is out of range, or only one of
                the time frame and the executions per time frame is set.
        """
        if self.iteration_timeout < 0:
            raise self.invalid('Iteration timeout must not be negative')

        if not 0 <= self.queue_pass_rate <= MAX_PASS_RATE:
            raise self.invalid(f'Queue pass rate must be within 0..100, got {self.queue_pass_rate}')

        if self.time_frame < 0 or self.executions_per_time_frame < 0:
            raise self.invalid('Execution speed limits must not be negative')

        if bool(self.time_frame) != bool(self.executions_per_time_frame):
            raise self.invalid('Both time frame and executions per time frame are required')

        return self

    @property
    def whole_thread_count(self) -> int:
        """Thread count of the whole workload."""
        return self.total_thread_count or self.thread_count

    def invalid(self, message: str) -> InvalidConfiguration:
        """Build a configuration error for this pattern."""
        return InvalidConfiguration(
            message,
            context=ErrorContext(element={
                key: value
                for key, value in self.__dict__.items()
                if value is not None
            }),
        )

    def distribute(self, host_count: int) -> list[Self]:
        """Split the pattern across hosts.

        Timing fields are preserved in every part; thread counts and,
        where applicable, steps and execution speed are split with
        `even_load`. When there are fewer threads (or executions per time
        frame) than hosts, a single part carries the whole workload.

        Args:
            host_count: Number of hosts.

        Returns:
            Sub-patterns in host order.

        Raises:
            InvalidConfiguration: If `host_count` is less than one, or the
                pattern can not be split across that many hosts.
        """
        if host_count < 1:
            raise self.invalid(f'Can not distribute a pattern across {host_count} hosts')

        if self.thread_count < host_count:
            logger.warning(
                'fewer threads than hosts, running the whole workload on one host',
                threads=self.thread_count,
                hosts=host_count,
            )
            return [self]

        if self.time_frame and self.executions_per_time_frame < host_count:
            logger.warning(
                'fewer executions per time frame than hosts, running the whole workload on one host',
                executions=self.executions_per_time_frame,
                hosts=host_count,
            )
            return [self]

        data = self.model_dump()
        data['total_thread_count'] = self.whole_thread_count

        return [
            type(self).model_validate({**data, **share})
            for share in self.split_shares(host_count)
        ]

    def split_shares(self, host_count: int) -> list[dict[str, Any]]:
        """Return per-host field overrides for distribution."""
        return [
            {'thread_count': threads}
            for threads in even_load(self.thread_count, host_count)
        ]

    @abstractmethod
    def describe(self) -> str:
        """Describe the pattern in human-readable form."""

    def describe_interval(self) -> str:
        """Describe the pause between iterations."""
        if self.interval_between_iterations > 0:
            return f'{self.interval_between_iterations} ms interval between iterations'

        if self.min_interval_between_iterations is not None:
            return (
                f'{self.min_interval_between_iterations} to '
                f'{self.max_interval_between_iterations} ms varying interval'
            )

        return 'no interval between iterations'

    def describe_limits(self) -> str:
        """Describe the timeout, execution speed and pass rate limits."""
        description = ''
        if self.iteration_timeout > 0:
            description += f', {self.iteration_timeout} secs iteration timeout'
        if getattr(self, 'use_synchronized_iterations', False):
            description += ', running synchronized iterations'
        if self.time_frame > 0:
            description += (
                f', max {self.executions_per_time_frame} total iterations '
                f'per {self.time_frame} secs'
            )
        if self.queue_pass_rate > 0:
            description += f', pass if {self.queue_pass_rate}% of the iterations pass'

        return description


class IterationsMixin(ThreadingPattern):
    """Pattern running a fixed number of iterations per thread."""

    iteration_count: int = Field(
        default=1,
        title='Iteration count',
        description='Number of iterations each thread runs.',
    )

    @model_validator(mode='after')
    def check_iterations(self) -> Self:
        """Check the iteration count.

        Raises:
            InvalidConfiguration: If the iteration count is negative.
        """
        if self.iteration_count < 0:
            raise self.invalid('Iteration count must not be negative')

        return self

    def describe_iterations(self) -> str:
        """Describe iterations of each thread."""
        if self.iteration_count <= 0:
            return ''

        if self.interval_between_iterations > 0 or self.min_interval_between_iterations is not None:
            return f', {self.iteration_count} iterations with {self.describe_interval()}'

        return f', {self.iteration_count} continuous iterations'


class DurationMixin(ThreadingPattern):
    """Pattern running iterations for a fixed time."""

    duration: int = Field(
        title='Duration',
        description='Time each thread keeps iterating, in seconds.',
    )

    @model_validator(mode='after')
    def check_duration(self) -> Self:
        """Check the duration.

        Raises:
            InvalidConfiguration: If the duration is negative.
        """
        if self.duration < 0:
            raise self.invalid('Duration must not be negative')

        return self
