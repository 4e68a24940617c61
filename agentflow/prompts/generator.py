"""Topic -> suggested image prompts, via a PydanticAI agent."""

from __future__ import annotations

import logging

from pydantic_ai import Agent

from agentflow.config import Settings
from agentflow.errors import UpstreamError
from agentflow.prompts.templates import format_image_prompts_prompt

logger = logging.getLogger(__name__)


class PromptGenerator:
    """Asks the configured LLM for a fixed number of image prompts about a topic."""

    def __init__(self, settings: Settings) -> None:
        self._model = f"{settings.llm_provider}:{settings.prompt_llm}"
        self._count = settings.prompt_count

    async def generate(self, topic: str) -> list[str]:
        """Return up to ``prompt_count`` prompts in generation order."""
        prompt = format_image_prompts_prompt(topic, self._count)

        agent = Agent(self._model, output_type=list[str])
        result = await agent.run(prompt)
        prompts = [p.strip() for p in result.output if p.strip()][: self._count]

        usage = result.usage()
        logger.info(
            "prompts generated",
            extra={
                "topic": topic[:100],
                "model": self._model,
                "prompts": len(prompts),
                "input_tokens": usage.input_tokens or 0,
                "output_tokens": usage.output_tokens or 0,
            },
        )
        if not prompts:
            raise UpstreamError("The prompt model returned no prompts.")
        return prompts
