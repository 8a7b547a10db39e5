"""Testing utilities for DazzlePrefs consumers."""

from .fixtures import make_tree, FailingBackingStore, TreeTestHelper

__all__ = ['make_tree', 'FailingBackingStore', 'TreeTestHelper']
