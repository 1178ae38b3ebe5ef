"""Distribution of load plans across agent hosts.

A load plan pairs a threading pattern with the parameter data of one
action queue. Distributing it splits both by host count and zips the
parts by host index, so host `i` always receives pattern part `i` and
data part `i`.
"""

from collections.abc import Sequence
from typing import Protocol

import structlog
from pydantic import Field

from loco_agent.actions import ActionRequest
from loco_agent.data import LoaderDataConfig
from loco_agent.errors import InvalidConfiguration
from loco_agent.models import SchemaModel
from loco_agent.patterns import AnyThreadingPattern

logger = structlog.get_logger(__name__)


class HostAssignment(SchemaModel):
    """Share of a load plan assigned to one host."""

    host: str = Field(
        title='Host',
        description='Address of the agent running this share.',
    )

    threading_pattern: AnyThreadingPattern = Field(
        title='Threading pattern',
        description='Pattern part of this host.',
    )

    data: LoaderDataConfig = Field(
        default_factory=LoaderDataConfig,
        title='Parameter data',
        description='Parameter data part of this host.',
    )


class LoadPlan(SchemaModel):
    """An action queue with its threading pattern and parameter data."""

    name: str = Field(
        default='load',
        min_length=1,
        title='Queue name',
        description='Name of the action queue on every agent.',
    )

    threading_pattern: AnyThreadingPattern = Field(
        title='Threading pattern',
        description='Pattern of the whole workload.',
    )

    data: LoaderDataConfig = Field(
        default_factory=LoaderDataConfig,
        title='Parameter data',
        description='Parameter data of the whole workload.',
    )

    actions: tuple[ActionRequest, ...] = Field(
        default_factory=tuple,
        title='Actions',
        description='Actions each thread runs on every iteration, in order.',
    )

    def distribute(self, hosts: Sequence[str]) -> list[HostAssignment]:
        """Split the plan across hosts.

        When the pattern can not be split that far it yields fewer parts
        than hosts, and only the leading hosts get an assignment.

        Args:
            hosts: Agent hosts in order.

        Returns:
            Assignments in host order.

        Raises:
            InvalidConfiguration: If there are no hosts, or the pattern or
                the data can not be split across them.
        """
        if not hosts:
            raise InvalidConfiguration(f'No hosts to run load queue {self.name!r} on')

        patterns = self.threading_pattern.distribute(len(hosts))
        if len(patterns) < len(hosts):
            logger.warning(
                'load queue runs on fewer hosts than requested',
                queue=self.name,
                requested=len(hosts),
                used=len(patterns),
            )

        data = self.data.distribute(len(patterns))

        return [
            HostAssignment(host=host, threading_pattern=pattern, data=part)
            for host, pattern, part in zip(hosts, patterns, data, strict=False)
        ]


class AgentTransport(Protocol):
    """Connection to remote agents running action queues."""

    def schedule(self, host: str, plan: LoadPlan, assignment: HostAssignment) -> None:
        """Prepare an action queue on a host without starting it."""

    def start(self, host: str, queue: str) -> None:
        """Start a scheduled action queue."""

    def wait(self, host: str, queue: str) -> None:
        """Block until an action queue finishes."""

    def cancel(self, host: str, queue: str) -> None:
        """Cancel a running action queue."""


class LoadCoordinator:
    """Run load plans on several agents through a transport.

    Attributes:
        transport: Connection to the agents.
    """

    def __init__(self, transport: AgentTransport) -> None:
        """Initialize the coordinator."""
        self.transport = transport
        self._running: dict[str, list[str]] = {}

    def execute(self, plan: LoadPlan, hosts: Sequence[str]) -> list[HostAssignment]:
        """Schedule every host's share, then start all of them.

        Parts are never started while other hosts are still being
        scheduled. For blocking plans the call returns after every host
        finished.

        Args:
            plan: Load plan of the whole workload.
            hosts: Agent hosts in order.

        Returns:
            The assignments sent to the hosts.
        """
        assignments = plan.distribute(hosts)
        blocking = plan.threading_pattern.block_until_completion

        for assignment in assignments:
            logger.info(
                'scheduling load queue',
                queue=plan.name,
                host=assignment.host,
                pattern=assignment.threading_pattern.describe(),
            )
            self.transport.schedule(
                assignment.host,
                plan,
                assignment.model_copy(update={
                    'threading_pattern': assignment.threading_pattern.model_copy(
                        update={'block_until_completion': False},
                    ),
                }),
            )

        used = [assignment.host for assignment in assignments]
        self._running[plan.name] = used

        for host in used:
            self.transport.start(host, plan.name)

        if blocking:
            self.wait(plan.name)

        return assignments

    def wait(self, queue: str) -> None:
        """Block until a queue finishes on every host it runs on."""
        for host in self._running.get(queue, []):
            self.transport.wait(host, queue)

        self._running.pop(queue, None)

    def cancel(self, queue: str) -> None:
        """Cancel a queue on every host it runs on.

        A failure on one host is logged and does not stop cancelling the
        queue on the remaining hosts.
        """
        for host in self._running.pop(queue, []):
            try:
                self.transport.cancel(host, queue)
            except Exception:
                logger.exception('failed to cancel load queue', queue=queue, host=host)
