"""CLI utilities for loco-agent load plans.

Load plans are YAML documents describing one action queue: its threading
pattern, its parameter data and the actions it runs.
"""

from pathlib import Path

from click import ClickException, argument, echo, group, option
from click import Path as PathParam
from pydantic import ValidationError
from yaml import safe_dump, safe_load

from loco_agent.distribution import LoadPlan
from loco_agent.errors import AgentError
from loco_agent.jsonschema import make_schema
from loco_agent.logs import configure_logging
from loco_agent.models import AgentSettings

InputFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)


def _read_plan(path: Path) -> LoadPlan:
    """Read and validate a load plan document.

    Raises:
        ClickException: If the document is not a valid load plan.
    """
    try:
        return LoadPlan.model_validate(safe_load(path.read_text()))
    except (AgentError, ValidationError) as error:
        raise ClickException(f'Invalid load plan {path}: {error}') from error


@group(help='Command-line utilities for loco-agent load plans.')
def cli() -> None:
    """Root CLI group for loco-agent tools."""
    configure_logging(AgentSettings())


@cli.command(
    name='schema',
    help='Print the load plan JSON Schema to standard output.',
)
def print_schema() -> None:
    """Generate and print the JSON Schema."""
    echo(make_schema())


@cli.command(
    name='describe',
    help='Print a human-readable description of a load plan pattern.',
)
@argument('plan', type=InputFilepath)
def describe_plan(plan: Path) -> None:
    """Describe the threading pattern of a plan."""
    echo(_read_plan(plan).threading_pattern.describe())


@cli.command(
    name='distribute',
    help='Split a load plan across hosts and print per-host assignments as YAML.',
)
@option(
    '-H', '--hosts', 'hosts',
    multiple=True,
    required=True,
    help='Agent host; repeat the option for every host.',
)
@argument('plan', type=InputFilepath)
def distribute_plan(plan: Path, hosts: tuple[str, ...]) -> None:
    """Distribute a plan and print the assignments.

    Args:
        plan: Path to the load plan document.
        hosts: Agent hosts in order.
    """
    load_plan = _read_plan(plan)

    try:
        assignments = load_plan.distribute(hosts)
    except AgentError as error:
        raise ClickException(str(error)) from error

    echo(safe_dump(
        [assignment.model_dump(mode='json') for assignment in assignments],
        sort_keys=False,
    ), nl=False)


if __name__ == '__main__':
    cli()
