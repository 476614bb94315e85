"""Testing utilities for ConjoinedTree consumers."""

from .fixtures import TreeTestHelper, build_scenario_tree

__all__ = ['TreeTestHelper', 'build_scenario_tree']
