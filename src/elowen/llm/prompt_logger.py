"""
Elowen - Prompt Logger.

Writes every collaborator call (prompt + response) to a Markdown file.
Enabled via ELOWEN_LOG_PROMPTS=1 or the --log-prompts CLI flag.

Image payloads are never written; only their size is recorded.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

LOG_PROMPTS = os.getenv("ELOWEN_LOG_PROMPTS", "0") == "1"
LOG_DIR = Path("prompt_logs")

_session_id: str | None = None
_call_counter: int = 0


def enable_prompt_logging(enabled: bool = True) -> None:
    """Enable or disable prompt logging."""
    global LOG_PROMPTS
    LOG_PROMPTS = enabled
    if enabled:
        LOG_DIR.mkdir(exist_ok=True)


def _session_dir() -> Path:
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = LOG_DIR / _session_id
    path.mkdir(parents=True, exist_ok=True)
    return path


def _render_response(response: Any) -> str:
    payload = response.model_dump() if hasattr(response, "model_dump") else response
    try:
        return f"```json\n{json.dumps(payload, indent=2, default=str)}\n```\n"
    except (TypeError, ValueError) as e:
        return f"```\n{response}\n```\n\n(Serialization error: {e})\n"


def log_prompt(
    *,
    task: str,
    model: str,
    system_prompt: str,
    user_prompt: str,
    response_model: str,
    response: Any = None,
    error: str | None = None,
    image_bytes: int | None = None,
) -> Path | None:
    """
    Log one collaborator call.

    Returns the path written, or None when logging is disabled.
    """
    if not LOG_PROMPTS:
        return None

    global _call_counter
    _call_counter += 1
    filepath = _session_dir() / f"{_call_counter:02d}_{task}.md"

    lines = [
        f"# Collaborator Call: {task}",
        "",
        f"**Time:** {datetime.now().isoformat()}",
        f"**Model:** {model}",
        f"**Response Model:** {response_model}",
    ]
    if image_bytes is not None:
        lines.append(f"**Image:** {image_bytes} bytes")
    lines += [
        "",
        "## System Prompt",
        "",
        "```",
        system_prompt,
        "```",
        "",
        "## User Prompt",
        "",
        "```",
        user_prompt,
        "```",
        "",
        "## Response",
        "",
    ]

    content = "\n".join(lines) + "\n"
    if error:
        content += f"**ERROR:** {error}\n"
    elif response is not None:
        content += _render_response(response)
    else:
        content += "(No response)\n"

    filepath.write_text(content, encoding="utf-8")
    return filepath


def get_session_log_dir() -> Path | None:
    """Current session's log directory, if logging is enabled."""
    if not LOG_PROMPTS:
        return None
    return _session_dir()


def reset_session() -> None:
    """Start a new log session (tests, sign-out)."""
    global _session_id, _call_counter
    _session_id = None
    _call_counter = 0
