"""Agent middleware."""

from .observability import observability_agent_middleware

__all__ = ["observability_agent_middleware"]
