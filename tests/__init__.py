"""Test suite for StageForge.

Test Structure:
- unit/: Unit tests grouped by core package (config, programs, production,
  topology, renderer, modes) plus the session coordinator, events and CLI
- fakes.py: Test doubles shared across modules
- conftest.py: Shared fixtures and program factories
"""
