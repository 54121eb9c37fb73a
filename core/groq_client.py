"""
Groq client for the single structured-notes request.
One call per request: no model fallback, no retry, no local timeout.
SDK errors (auth, rate limit, network) propagate to the caller unchanged.
"""
import os

from dotenv import load_dotenv
from groq import Groq

load_dotenv()

DEFAULT_MODEL = os.environ.get("GROQ_MODEL", "llama-3.3-70b-versatile")


def get_groq_client():
    api_key = os.environ.get("GROQ_API_KEY")
    if not api_key:
        raise ValueError(
            "GROQ_API_KEY not set. Please add it to your .env file or HuggingFace Space Secrets."
        )
    return Groq(api_key=api_key)


def groq_chat(
    messages: list,
    model: str = None,
    temperature: float = 0.4,
    max_tokens: int = 4096,
    json_mode: bool = False,
) -> str:
    """
    Send messages to Groq and return the reply text.
    json_mode asks the service to answer with a single JSON object.
    """
    client = get_groq_client()
    kwargs = {}
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    response = client.chat.completions.create(
        model=model or DEFAULT_MODEL,
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
        **kwargs,
    )
    content = response.choices[0].message.content
    return content.strip() if content else ""
