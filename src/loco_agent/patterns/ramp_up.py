"""Patterns starting threads in steps."""

from typing import Any, Literal, Self

from pydantic import Field, model_validator

from loco_agent.balancing import even_load

from .base import DurationMixin, IterationsMixin, ThreadingPattern


class RampUpMixin(ThreadingPattern):
    """Ramp-up timing shared by both variants.

    Every `ramp_up_interval` milliseconds another `thread_count_per_step`
    threads are started, until the whole thread count runs.
    """

    ramp_up_interval: int = Field(
        default=0,
        title='Ramp-up interval',
        description='Pause between two ramp-up steps, in milliseconds.',
    )

    thread_count_per_step: int = Field(
        default=1,
        title='Threads per step',
        description=(
            'Number of threads started on every ramp-up step. Must be '
            'less than the thread count of the whole workload.'
        ),
    )

    @model_validator(mode='after')
    def check_ramp_up(self) -> Self:
        """Check ramp-up timing.

        Raises:
            InvalidConfiguration: If the interval is negative, or the step
                is not positive or not less than the whole thread count.
        """
        if self.ramp_up_interval < 0:
            raise self.invalid('Ramp-up interval must not be negative')

        if not 0 < self.thread_count_per_step < self.whole_thread_count:
            raise self.invalid(
                f'Thread count per step must be positive and less than '
                f'the thread count {self.whole_thread_count}, '
                f'got {self.thread_count_per_step}',
            )

        return self

    def split_shares(self, host_count: int) -> list[dict[str, Any]]:
        """Split threads and ramp-up steps.

        Raises:
            InvalidConfiguration: If a step has fewer threads than hosts.
        """
        if self.thread_count_per_step < host_count:
            raise self.invalid(
                f'Can not distribute ramp-up steps of {self.thread_count_per_step} '
                f'threads across {host_count} hosts',
            )

        shares = super().split_shares(host_count)
        steps = even_load(self.thread_count_per_step, host_count)
        for share, count in zip(shares, steps, strict=True):
            share['thread_count_per_step'] = count

        return shares

    def describe_ramp_up(self) -> str:
        """Describe ramp-up steps."""
        return f'{self.thread_count_per_step} threads every {self.ramp_up_interval} ms'


class RampUpPattern(RampUpMixin, IterationsMixin):
    """Start threads in steps, each running a number of iterations."""

    pattern: Literal['ramp_up'] = 'ramp_up'

    def describe(self) -> str:
        """Describe the pattern."""
        return (
            f'Ramp up - {self.whole_thread_count} total threads, '
            f'{self.describe_ramp_up()}'
            f'{self.describe_iterations()}'
            f'{self.describe_limits()}'
        )


class FixedDurationRampUpPattern(RampUpMixin, DurationMixin):
    """Start threads in steps, each iterating for a fixed time."""

    pattern: Literal['fixed_duration_ramp_up'] = 'fixed_duration_ramp_up'

    def describe(self) -> str:
        """Describe the pattern."""
        return (
            f'Fixed duration ramp up - {self.whole_thread_count} total threads '
            f'in {self.duration} seconds, {self.describe_ramp_up()}, '
            f'{self.describe_interval()}'
            f'{self.describe_limits()}'
        )
