"""AI challenge generator - asks DashScope (通义千问) for a fresh challenge.

The DashScope SDK call is synchronous, so it runs in a worker thread and is
bounded by ``AI_TIMEOUT_SECONDS``. Every failure mode (missing key, transport
error, non-200 status, timeout, unparseable output) yields ``None``.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from casino.config import settings
from casino.core.challenge import Challenge, ChallengeContent, Difficulty

logger = structlog.get_logger()

PROMPT_PATH = Path(__file__).parent.parent / "data" / "prompts" / "challenge_generator.yaml"


def _get_generation():
    """Lazy import of dashscope.Generation to avoid import-time crashes in test."""
    import dashscope
    from dashscope import Generation

    dashscope.api_key = settings.DASHSCOPE_API_KEY
    return Generation


def load_prompt_config(path: Path = PROMPT_PATH) -> dict:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class GeneratedChallenge(BaseModel):
    """Shape the model is asked to return."""
    title: str = "AI Generated Challenge"
    description: str = ""
    code_snippet1: str = Field(alias="codeSnippet1", min_length=1)
    code_snippet2: str = Field(alias="codeSnippet2", min_length=1)
    correct_answer: int = Field(alias="correctAnswer", ge=1, le=2)
    explanation: str = ""


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_challenge_response(text: str, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
    """Parse raw model output into an AI challenge, or None if malformed."""
    try:
        data = GeneratedChallenge.model_validate(json.loads(strip_code_fence(text)))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("ai_response_unparseable", error=str(exc), response=text[:500])
        return None

    return Challenge.ai(
        ChallengeContent(
            title=data.title,
            description=data.description,
            snippet1=data.code_snippet1,
            snippet2=data.code_snippet2,
            correct_answer=data.correct_answer,
            explanation=data.explanation,
            tech_stack=tech_stack,
            difficulty=difficulty,
        )
    )


class AIChallengeGenerator:
    def __init__(self, timeout: float | None = None):
        self.model = settings.LLM_MODEL
        self.timeout = timeout if timeout is not None else settings.AI_TIMEOUT_SECONDS
        self._prompt = load_prompt_config()

    def build_messages(self, tech_stack: str, difficulty: Difficulty) -> list[dict]:
        labels = self._prompt.get("difficulty_labels", {})
        user_prompt = self._prompt.get("user_template", "").format(
            tech_stack=tech_stack,
            difficulty=difficulty.value,
            difficulty_label=labels.get(difficulty.value, difficulty.value),
        )
        return [
            {"role": "system", "content": self._prompt.get("system_prompt", "")},
            {"role": "user", "content": user_prompt},
        ]

    def _call(self, messages: list[dict]):
        params = self._prompt.get("model_params", {})
        Generation = _get_generation()
        return Generation.call(
            model=self.model,
            messages=messages,
            result_format="message",
            temperature=params.get("temperature", 0.9),
            top_p=params.get("top_p", 0.8),
            max_tokens=params.get("max_tokens", 1500),
        )

    async def generate(self, tech_stack: str, difficulty: Difficulty) -> Challenge | None:
        if not settings.DASHSCOPE_API_KEY:
            logger.debug("ai_generator_disabled", reason="DASHSCOPE_API_KEY not set")
            return None

        messages = self.build_messages(tech_stack, difficulty)
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(self._call, messages), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning("ai_generation_timeout", timeout=self.timeout, tech_stack=tech_stack)
            return None
        except Exception as exc:  # SDK/transport errors are not typed
            logger.warning("ai_generation_failed", error=str(exc), tech_stack=tech_stack)
            return None

        if response.status_code != 200:
            logger.warning(
                "ai_generation_error_status",
                status_code=response.status_code,
                message=getattr(response, "message", ""),
            )
            return None

        content = response.output.choices[0].message.content
        if not content:
            return None
        return parse_challenge_response(content, tech_stack, difficulty)


ai_generator = AIChallengeGenerator()
