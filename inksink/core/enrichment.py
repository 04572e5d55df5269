"""Document-context enrichment of the conversation sent to agents."""

from typing import Optional

from ..schemas.common import ChatMessage

DOCUMENT_CONTEXT_TEMPLATE = """{instruction}

---
The user is working on the document below. Use it as the context for the request above.

<document>
{content}
</document>"""


def enrich_with_document(
    messages: list[ChatMessage], content: Optional[str] = None
) -> list[ChatMessage]:
    """Rewrite the last user turn so it carries the document snapshot.

    Only the most recent user message is wrapped; every other message is
    passed through untouched. Without a snapshot or a user message the
    history is returned unchanged.

    Args:
        messages: Conversation history in insertion order
        content: Document text being edited, if any

    Returns:
        A new list; the input list and its messages are not mutated
    """
    if not content:
        return list(messages)

    last_user_index = next(
        (i for i in range(len(messages) - 1, -1, -1) if messages[i].role == "user"),
        None,
    )
    if last_user_index is None:
        return list(messages)

    enriched = list(messages)
    original = messages[last_user_index]
    enriched[last_user_index] = original.model_copy(
        update={
            "content": DOCUMENT_CONTEXT_TEMPLATE.format(
                instruction=original.content, content=content
            )
        }
    )
    return enriched
