"""
Core interfaces the milestone client and batch executor depend on.
"""

from mrmm.core.interfaces import TraceStore, Transport

__all__ = ["TraceStore", "Transport"]
