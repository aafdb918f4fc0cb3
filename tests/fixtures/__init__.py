"""Test fixtures for roster-sync tests.

This module provides test fixtures for:
- An in-memory fake directory service
- A scripted confirmation prompter
- Group listing and registry builders
"""

from .directory_fixtures import (
    FakeDirectoryAPI,
    ScriptedPrompter,
    make_group,
    make_registry,
)

__all__ = [
    'FakeDirectoryAPI',
    'ScriptedPrompter',
    'make_group',
    'make_registry',
]
