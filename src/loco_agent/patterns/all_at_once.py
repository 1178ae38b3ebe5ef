"""Patterns starting all threads at once."""

from typing import Any, Literal

from pydantic import Field

from loco_agent.balancing import even_load

from .base import DurationMixin, IterationsMixin, ThreadingPattern


class SynchronizedMixin(ThreadingPattern):
    """All-at-once behaviour shared by both variants."""

    use_synchronized_iterations: bool = Field(
        default=False,
        title='Synchronized iterations',
        description='Whether threads wait for each other before every iteration.',
    )

    def split_shares(self, host_count: int) -> list[dict[str, Any]]:
        """Split threads and the execution speed limit."""
        shares = super().split_shares(host_count)
        if not self.time_frame:
            return shares

        executions = even_load(self.executions_per_time_frame, host_count)
        for share, count in zip(shares, executions, strict=True):
            share['executions_per_time_frame'] = count

        return shares


class AllAtOncePattern(SynchronizedMixin, IterationsMixin):
    """Start all threads at once, each running a number of iterations."""

    pattern: Literal['all_at_once'] = 'all_at_once'

    def describe(self) -> str:
        """Describe the pattern."""
        return (
            f'All at once - {self.whole_thread_count} threads'
            f'{self.describe_iterations()}'
            f'{self.describe_limits()}'
        )


class FixedDurationAllAtOncePattern(SynchronizedMixin, DurationMixin):
    """Start all threads at once, each iterating for a fixed time."""

    pattern: Literal['fixed_duration_all_at_once'] = 'fixed_duration_all_at_once'

    def describe(self) -> str:
        """Describe the pattern."""
        return (
            f'Fixed duration all at once - {self.whole_thread_count} threads '
            f'in {self.duration} seconds, {self.describe_interval()}'
            f'{self.describe_limits()}'
        )
