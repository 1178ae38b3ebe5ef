"""Test suite for the loco-agent package.

This package contains unit and integration tests validating action
registration and dispatch, component loading, threading patterns,
parameter data distribution and load plan coordination.
"""
