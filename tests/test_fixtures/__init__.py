"""
Test Fixtures Package

Shared test utilities: mock redis clients, sessions wired to them, and a
fake session factory for registry tests.
"""

from .backend_factory import BackendTestFactory, FakeSession, fake_session_factory

__all__ = ["BackendTestFactory", "FakeSession", "fake_session_factory"]
