"""
Restricted-content guard for the health advice chat.

A plain case-insensitive substring check against a fixed term list, run on
the user's message before it is sent and on the model's reply after it comes
back. Short terms such as "DAN" also match inside longer words; that is
accepted.
"""
from typing import List, Optional

RESTRICTED_TOPICS = (
    "suicide",
    "self-harm",
    "illegal drugs",
    "illegal substances",
    "drug manufacturing",
    "abortion",
    "euthanasia",
    "abuse",
    "dangerous treatments",
    "weapons",
    "violence",
    "hacking",
    "explicit content",
    "jailbreak",
    "DAN",
    "ignore previous instructions",
    "bypass restrictions",
)

INBOUND_REFUSAL = (
    "I'm sorry, but I cannot provide information on that topic. I'm designed to provide "
    "general wellness advice while prioritizing your safety and wellbeing. Please ask about "
    "general health and wellness topics that I can assist with."
)

OUTBOUND_REFUSAL = (
    "I apologize, but I'm unable to provide that information as it may involve restricted "
    "topics. I'm designed to offer general wellness advice while maintaining ethical "
    "boundaries. Please feel free to ask about other health and wellness topics I can help with."
)


def find_restricted_terms(text: Optional[str]) -> List[str]:
    """Return every restricted term that appears in ``text`` (case-insensitive)."""
    lowered = (text or "").lower()
    return [term for term in RESTRICTED_TOPICS if term.lower() in lowered]


def screen_inbound(message: str) -> Optional[str]:
    """
    Check a user message before it reaches the model.

    Returns:
        The refusal message if a restricted term matched, otherwise None
    """
    found = find_restricted_terms(message)
    if found:
        print(f"Restricted content in user message: {found}")
        return INBOUND_REFUSAL
    return None


def screen_reply(reply: str) -> str:
    """Return the model's reply, or the refusal message if it mentions a restricted term."""
    found = find_restricted_terms(reply)
    if found:
        print(f"Restricted content in model reply: {found}")
        return OUTBOUND_REFUSAL
    return reply
