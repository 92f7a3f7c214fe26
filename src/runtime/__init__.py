"""Runtime engine exports."""

from .loop import PollResult, RuntimeBootstrap, RuntimeEngine

__all__ = ["PollResult", "RuntimeBootstrap", "RuntimeEngine"]
