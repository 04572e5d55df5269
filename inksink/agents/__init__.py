"""Chat agents: intent classifier, responders and title generator."""

from .assistant_agent import create_assistant_agent
from .classifier import IntentClassifier, create_classifier_agent
from .research_agent import create_research_agent
from .responders import ClarificationResponder, Responder, TokenStream
from .title_agent import create_title_agent, generate_title
from .writer_agent import create_writer_agent

__all__ = [
    # Agent factories
    "create_assistant_agent",
    "create_classifier_agent",
    "create_research_agent",
    "create_title_agent",
    "create_writer_agent",
    # Wrappers
    "ClarificationResponder",
    "IntentClassifier",
    "Responder",
    "TokenStream",
    "generate_title",
]
