"""Tests for command-line utilities."""

from json import loads
from typing import TYPE_CHECKING

import pytest
import yaml
from click.testing import CliRunner

from loco_agent.__main__ import cli

if TYPE_CHECKING:
    from pathlib import Path

PLAN = """
name: uploads
threading_pattern:
  pattern: ramp_up
  thread_count: 99
  iteration_count: 20
  interval_between_iterations: 500
  ramp_up_interval: 1000
  thread_count_per_step: 9
data:
  configs:
    - kind: range
      parameter_name: id
      start: 10
      end: 20
actions:
  - component: files
    action: upload
    arguments: [report.txt, 10]
"""


@pytest.fixture
def plan(tmp_path: 'Path') -> 'Path':
    """Provide a load plan document on disk."""
    path = tmp_path / 'plan.yaml'
    path.write_text(PLAN)

    return path


def test_schema() -> None:
    """Print the load plan JSON Schema."""
    result = CliRunner().invoke(cli, ['schema'])

    assert result.exit_code == 0
    schema = loads(result.output)
    assert schema['title'] == 'loco-agent'
    assert 'threading_pattern' in schema['properties']


def test_describe(plan: 'Path') -> None:
    """Print the pattern description of a plan."""
    result = CliRunner().invoke(cli, ['describe', str(plan)])

    assert result.exit_code == 0
    assert result.output == (
        'Ramp up - 99 total threads, 9 threads every 1000 ms, '
        '20 iterations with 500 ms interval between iterations\n'
    )


def test_distribute(plan: 'Path') -> None:
    """Print per-host assignments as YAML."""
    result = CliRunner().invoke(cli, ['distribute', str(plan), '-H', 'alpha', '-H', 'beta', '-H', 'gamma'])

    assert result.exit_code == 0
    assignments = yaml.safe_load(result.output)
    assert [assignment['host'] for assignment in assignments] == ['alpha', 'beta', 'gamma']
    assert [assignment['threading_pattern']['thread_count'] for assignment in assignments] == [33, 33, 33]
    assert [assignment['threading_pattern']['thread_count_per_step'] for assignment in assignments] == [3, 3, 3]
    assert [
        (assignment['data']['configs'][0]['start'], assignment['data']['configs'][0]['end'])
        for assignment in assignments
    ] == [(10, 12), (13, 16), (17, 20)]


def test_distribute_impossible(plan: 'Path') -> None:
    """Report plans that can not be split across the hosts."""
    hosts = [argument for index in range(12) for argument in ('-H', f'host{index}')]

    result = CliRunner().invoke(cli, ['distribute', str(plan), *hosts])

    assert result.exit_code == 1
    assert 'Can not distribute ramp-up steps of 9 threads across 12 hosts' in result.output


def test_invalid_plan(tmp_path: 'Path') -> None:
    """Report invalid load plan documents."""
    path = tmp_path / 'plan.yaml'
    path.write_text('threading_pattern: {pattern: all_at_once, thread_count: 0}\n')

    result = CliRunner().invoke(cli, ['describe', str(path)])

    assert result.exit_code == 1
    assert 'Thread count must be positive' in result.output
