"""Shared pytest fixtures for the book catalog tests."""

from .core import *  # noqa: F401,F403
