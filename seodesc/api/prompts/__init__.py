"""Prompt templates."""

from .loader import PromptError, PromptNotFoundError, PromptPack, PromptTemplate, SlotSpec
from .templates import DEFAULT_PACK, brand_slots

__all__ = [
    "DEFAULT_PACK",
    "PromptError",
    "PromptNotFoundError",
    "PromptPack",
    "PromptTemplate",
    "SlotSpec",
    "brand_slots",
]
