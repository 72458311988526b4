import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from genkit.ai import Genkit
from genkit.plugins.google_genai import GoogleAI

from nutricart.ai.normalizer import (
    FallbackTable,
    GenerationResult,
    ResponseShape,
    normalize,
)

load_dotenv()

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "googleai/gemini-2.5-flash")


class UpstreamUnavailable(Exception):
    """The generative service could not be called or returned nothing."""


# Stand-in used when Gemini is not configured: every call fails fast so
# callers go straight to their fallback rows.
class SimpleAI:
    def __init__(self, reason: str):
        self.reason = reason

    def flow(self):
        def decorator(func):
            return func
        return decorator

    async def generate(self, prompt=None, config=None, **kwargs):
        raise UpstreamUnavailable(self.reason)


def initialize_ai():
    """
    Initialize the Genkit client for Gemini.

    Returns:
        Genkit instance, or SimpleAI when no key is set or setup fails
    """
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        print("GEMINI_API_KEY not configured, AI features will use fallback data")
        return SimpleAI("GEMINI_API_KEY not configured")

    try:
        client = Genkit(
            plugins=[GoogleAI(api_key=api_key)],
            model=GEMINI_MODEL,
        )
        print(f"✅ Genkit initialized with model {GEMINI_MODEL}")
        return client
    except Exception as e:
        print(f"❌ Could not initialize Genkit: {e}")
        return SimpleAI(f"Genkit initialization failed: {e}")


ai = initialize_ai()


async def generate_text(prompt: str, config: Optional[Dict[str, Any]] = None) -> str:
    """Send a prompt to the model and return the reply text."""
    result = await ai.generate(prompt=prompt, config=config)
    text = getattr(result, "text", None)
    if text is None:
        raise UpstreamUnavailable("Model returned no text")
    return text


async def generate_with_fallback(
    prompt: str,
    expected_shape: Optional[ResponseShape],
    fallback_key: Optional[str],
    fallback_table: FallbackTable,
    config: Optional[Dict[str, Any]] = None,
) -> GenerationResult:
    """
    Call the model and normalize its reply.

    If the call itself fails the fallback row is returned without trying to
    normalize anything, so an outage never surfaces as an error.
    """
    try:
        raw_text = await generate_text(prompt, config)
    except Exception as e:
        print(f"Gemini API error: {e}")
        return fallback_table.lookup(fallback_key)

    return normalize(raw_text, expected_shape, fallback_key, fallback_table)
