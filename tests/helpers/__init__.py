"""Test helpers for craftmapper.

This package provides utilities for testing without network access:
- FakeSession / FakeResponse: canned combine endpoint
- ScriptedRandom: deterministic pair draws
"""

from .fake_upstream import FakeResponse, FakeSession, RecordedCall, ScriptedRandom

__all__ = [
    "FakeResponse",
    "FakeSession",
    "RecordedCall",
    "ScriptedRandom",
]
