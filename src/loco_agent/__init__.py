"""Action dispatch and workload distribution for load-testing agents.

The `loco_agent` package provides the core of a remote load-testing
agent: actions are called by name with runtime values only and resolved
against overloaded implementations, while a declared load (a threading
pattern and its parameter data) is split across any number of agents so
that their aggregate matches the single logical workload.

Key features:
- runtime overload resolution with ambiguity detection and pluggable
  type compatibility rules;
- component discovery through Python entry points;
- immutable threading patterns and parameter data configurations with
  deterministic even distribution across hosts;
- a coordinator driving agents through an abstract transport.
"""
