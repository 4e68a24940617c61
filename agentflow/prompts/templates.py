"""Prompt templates for the prompt-suggestion flow."""

IMAGE_PROMPTS_PROMPT = """\
You are an AI prompt generator. Your job is to generate a series of prompts \
for an image generation model based on a topic that a user provides to you.

Generate {count} different prompts based on the following topic:

{topic}

Each prompt should describe a single image: subject, setting, style and mood.
Respond with ONLY a JSON array of strings, e.g. ["prompt 1", "prompt 2"].
"""


def format_image_prompts_prompt(topic: str, count: int = 5) -> str:
    return IMAGE_PROMPTS_PROMPT.format(topic=topic, count=count)
