"""InkSink chat orchestration: intent routing, agent streaming and SSE transport."""

__version__ = "1.0.0"
