"""
Elowen - Model Router.

Picks model and sampling parameters per collaborator task.

Tasks:
- routine: Assessment -> AM/PM routine (text, some creativity)
- vision: Photo -> skin metrics (image input, deterministic)
"""

from typing import Literal, TypedDict

from elowen.config import settings


class ModelConfig(TypedDict, total=False):
    """Configuration for model calls."""

    model: str
    temperature: float


Task = Literal["routine", "vision"]

# Sampling per task; model names come from settings
TASK_TEMPERATURES: dict[str, float] = {
    "routine": 0.5,
    "vision": 0.2,
}

DEFAULT_MODEL = "gpt-4.1-mini"


def get_model(task: Task | str) -> str:
    """Model name for a task."""
    if task == "vision":
        return settings.vision_model
    if task == "routine":
        return settings.routine_model
    return DEFAULT_MODEL


def get_model_config(task: Task | str) -> ModelConfig:
    """
    Full model configuration for a task.

    Returns a fresh dict each call; callers may mutate it.
    """
    config: ModelConfig = {"model": get_model(task)}
    if task in TASK_TEMPERATURES:
        config["temperature"] = TASK_TEMPERATURES[task]
    return config
