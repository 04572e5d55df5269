"""Chat workflow and its run adapter."""

from .chat_workflow import (
    ChatAgents,
    Conversation,
    RoutedConversation,
    create_chat_agents,
    create_chat_workflow,
    select_branch,
)
from .runner import ChatWorkflowRun, ChatWorkflowRunner, WorkflowState

__all__ = [
    "ChatAgents",
    "ChatWorkflowRun",
    "ChatWorkflowRunner",
    "Conversation",
    "RoutedConversation",
    "WorkflowState",
    "create_chat_agents",
    "create_chat_workflow",
    "select_branch",
]
