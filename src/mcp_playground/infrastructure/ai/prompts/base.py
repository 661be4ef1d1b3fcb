"""Prompt version metadata shared by all prompts."""

from dataclasses import dataclass


@dataclass
class PromptVersion:
    """Prompt version metadata."""

    version: str
    name: str
    description: str
