"""Shared fixtures for the DazzlePrefs test suite."""

import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# The process-wide default tree must never touch the real home directory
os.environ["DAZZLEPREFS_BACKEND"] = "memory"

from dazzleprefs import Scope
from dazzleprefs.testing import make_tree


ROOT_PARAMS = [
    pytest.param((Scope.USER, True), id="user"),
    pytest.param((Scope.SYSTEM, False), id="system"),
]


@pytest.fixture
def tree():
    """A fresh in-memory preference tree."""
    return make_tree()


@pytest.fixture(params=ROOT_PARAMS)
def scoped_root(request, tree):
    """(root, scope, is_user) for both scopes of a fresh tree."""
    scope, is_user = request.param
    return tree.root(scope), scope, is_user


@pytest.fixture
def root(scoped_root):
    """The root node of each scope of a fresh tree."""
    return scoped_root[0]
