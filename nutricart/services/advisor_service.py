"""
Health Advisor Service
Runs one turn of the health chat with restricted-content screening on both sides.
"""
from typing import List, Optional

from nutricart.ai.content_guard import screen_inbound, screen_reply
from nutricart.ai.flows.health_chat import ChatTurn, HealthChatInput, health_chat
from nutricart.services.purchase_history import (
    CHAT_WINDOW_DAYS,
    get_measurement_summary,
    get_recent_purchases,
    summarize_purchases,
)

NO_PURCHASE_HISTORY = "No recent purchase history available."


def get_purchase_context(user_id: str):
    """Purchase summary for the chat prompt, or a short note when there is nothing to share."""
    try:
        purchases = get_recent_purchases(user_id, CHAT_WINDOW_DAYS)
    except Exception as e:
        print(f"Error fetching purchase history: {e}")
        return {"note": "Error fetching purchase history."}

    if not purchases:
        return {"note": NO_PURCHASE_HISTORY}
    return summarize_purchases(purchases)


async def chat(
    user_id: str,
    message: str,
    history: Optional[List[ChatTurn]] = None,
    use_purchase_context: bool = False,
) -> str:
    """
    Answer a chat message.

    A message containing a restricted term is refused without calling the
    model. A reply containing one is replaced by a refusal.

    Args:
        user_id: User ID
        message: The user's message
        history: Earlier turns, oldest first
        use_purchase_context: Whether the user allowed purchase history in the prompt

    Returns:
        The reply text
    """
    refusal = screen_inbound(message)
    if refusal is not None:
        return refusal

    purchase_summary = get_purchase_context(user_id) if use_purchase_context else None

    result = await health_chat(
        HealthChatInput(
            message=message,
            history=history or [],
            purchase_summary=purchase_summary,
            measurements=get_measurement_summary(user_id),
        )
    )

    return screen_reply(result.reply)
