"""Gemini candidate payload shapes.

The generateContent payload has been observed in several layouts. Each is a
variant of ``CandidateContent``; ``classify_content`` picks the variant and
``extract_candidate_text`` turns a whole response payload into text.

Variants, in precedence order:
- PartsContent: ``content.parts[*].text`` (the documented layout)
- TextContent: ``content.text``
- StringContent: ``content`` is itself a string
- OpaqueContent: anything else, resolved by searching for the first
  non-empty string leaf
"""

from dataclasses import dataclass
from typing import Any, Literal

from seodesc.api.core.errors import ProviderError

PROVIDER = "gemini"

# Keys that hold metadata rather than generated text
_NON_TEXT_KEYS = frozenset({"role", "finish_reason", "finishReason", "thought_signature", "thoughtSignature"})


@dataclass(frozen=True)
class PartsContent:
    parts: list[Any]
    kind: Literal["parts"] = "parts"

    def text(self) -> str | None:
        texts = [
            part["text"]
            for part in self.parts
            if isinstance(part, dict) and isinstance(part.get("text"), str) and not part.get("thought")
        ]
        if texts:
            return "".join(texts)
        # Parts without a text field: fall back to the first part's own leaves
        return first_string_leaf(self.parts[0])


@dataclass(frozen=True)
class TextContent:
    value: str
    kind: Literal["text"] = "text"

    def text(self) -> str | None:
        return self.value


@dataclass(frozen=True)
class StringContent:
    value: str
    kind: Literal["string"] = "string"

    def text(self) -> str | None:
        return self.value


@dataclass(frozen=True)
class OpaqueContent:
    raw: Any
    kind: Literal["deep_search"] = "deep_search"

    def text(self) -> str | None:
        return first_string_leaf(self.raw)


CandidateContent = PartsContent | TextContent | StringContent | OpaqueContent


def classify_content(content: Any) -> CandidateContent:
    """Pick the shape variant for a candidate's ``content`` value."""
    if isinstance(content, str):
        return StringContent(content)
    if isinstance(content, dict):
        parts = content.get("parts")
        if isinstance(parts, list) and parts:
            return PartsContent(parts)
        if isinstance(content.get("text"), str) and content["text"]:
            return TextContent(content["text"])
    return OpaqueContent(content)


def first_string_leaf(value: Any) -> str | None:
    """Depth-first search for the first non-empty string.

    Example:
        >>> first_string_leaf({"a": {"b": ["", "found"]}})
        'found'
    """
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, dict):
        for key, child in value.items():
            if key in _NON_TEXT_KEYS:
                continue
            found = first_string_leaf(child)
            if found:
                return found
    elif isinstance(value, list):
        for child in value:
            found = first_string_leaf(child)
            if found:
                return found
    return None


def extract_candidate_text(payload: dict[str, Any]) -> str:
    """Extract generated text from a generateContent response payload.

    Raises:
        ProviderError: no candidates, no content, or no usable text
    """
    candidates = payload.get("candidates") or []
    if not candidates:
        raise ProviderError("No candidates returned from Gemini API", PROVIDER)

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not content:
        raise ProviderError("No content in Gemini API response", PROVIDER)

    shape = classify_content(content)
    text = shape.text()
    if not text or not text.strip():
        raise ProviderError(
            "No text content found in Gemini API response",
            PROVIDER,
            details={"shape": shape.kind},
        )
    return text
