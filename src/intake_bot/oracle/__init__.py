"""
Text-completion oracle access.
"""

from intake_bot.oracle.client import CompletionClient, HttpCompletionClient
from intake_bot.oracle.fallback import call_with_fallback, extract_json_object
from intake_bot.oracle.prompts import PROMPT_TEMPLATES, PromptRubric

__all__ = [
    "CompletionClient",
    "HttpCompletionClient",
    "call_with_fallback",
    "extract_json_object",
    "PROMPT_TEMPLATES",
    "PromptRubric",
]
