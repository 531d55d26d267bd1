"""
Elowen - LLM Client.

Wraps the async OpenAI client with Instructor so every collaborator call
returns a validated Pydantic model. All calls go through here for
consistency and prompt logging.
"""

import base64
from typing import TypeVar

import instructor
from openai import AsyncOpenAI
from pydantic import BaseModel

from elowen.config import settings
from elowen.llm.model_router import get_model_config
from elowen.llm.prompt_logger import log_prompt

# Type variable for generic structured output
T = TypeVar("T", bound=BaseModel)

# Singleton client instance
_client: instructor.AsyncInstructor | None = None


def get_client() -> instructor.AsyncInstructor:
    """
    Get the Instructor-wrapped async OpenAI client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        openai_client = AsyncOpenAI(api_key=settings.openai_api_key)
        _client = instructor.from_openai(openai_client)

    return _client


def image_data_url(image: bytes, mime_type: str = "image/jpeg") -> str:
    """Encode raw image bytes as a data URL for vision input."""
    return f"data:{mime_type};base64,{base64.b64encode(image).decode('ascii')}"


async def _create(
    *,
    task: str,
    response_model: type[T],
    system_prompt: str,
    user_prompt: str,
    user_content: str | list[dict],
    max_retries: int,
    image_bytes: int | None = None,
) -> T:
    client = get_client()
    config = get_model_config(task)
    model = config.pop("model")

    api_kwargs = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ],
        "response_model": response_model,
        "max_retries": max_retries,
        "store": False,  # Explicitly disable conversation storage
    }
    if "temperature" in config:
        api_kwargs["temperature"] = config["temperature"]

    try:
        response = await client.chat.completions.create(**api_kwargs)
    except Exception as e:
        log_prompt(
            task=task,
            model=model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            response_model=response_model.__name__,
            error=str(e),
            image_bytes=image_bytes,
        )
        raise

    log_prompt(
        task=task,
        model=model,
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        response_model=response_model.__name__,
        response=response,
        image_bytes=image_bytes,
    )
    return response


async def call_llm(
    *,
    response_model: type[T],
    system_prompt: str,
    user_prompt: str,
    task: str = "routine",
    max_retries: int = 2,
) -> T:
    """
    Make a structured text-only LLM call.

    Args:
        response_model: Pydantic model class for the response
        system_prompt: System message setting context
        user_prompt: User message with the actual request
        task: Task name for model selection ("routine", "vision")
        max_retries: Instructor re-asks if the response doesn't match schema

    Returns:
        Instance of response_model with validated data

    Example:
        plan = await call_llm(
            response_model=RoutinePlan,
            system_prompt="You are a skincare coach...",
            user_prompt="Skin Type: Dry ...",
        )
        print(plan.am[0].name)
    """
    return await _create(
        task=task,
        response_model=response_model,
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        user_content=user_prompt,
        max_retries=max_retries,
    )


async def call_llm_vision(
    *,
    response_model: type[T],
    system_prompt: str,
    user_prompt: str,
    image: bytes,
    mime_type: str = "image/jpeg",
    max_retries: int = 2,
) -> T:
    """
    Make a structured LLM call with one image attached to the user message.

    The image bytes are only read here; nothing keeps a reference to them.
    """
    content = [
        {"type": "image_url", "image_url": {"url": image_data_url(image, mime_type)}},
        {"type": "text", "text": user_prompt},
    ]
    return await _create(
        task="vision",
        response_model=response_model,
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        user_content=content,
        max_retries=max_retries,
        image_bytes=len(image),
    )
