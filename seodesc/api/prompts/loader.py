"""Typed prompt templates.

Template syntax:
- ``{{name}}`` is replaced by the slot value (empty string for None)
- ``{{#name}} ... {{/name}}`` renders its inner text only when the slot
  value is truthy

Every placeholder must be declared as a slot; rendering checks required
slots and value types before substituting anything.
"""

import re
from dataclasses import dataclass, field
from typing import Any

_SECTION_RE = re.compile(r"{{#(\w+)}}(.*?){{/\1}}", re.DOTALL)
_SLOT_RE = re.compile(r"{{(\w+)}}")


class PromptError(Exception):
    """Error in prompt operations."""


class PromptNotFoundError(PromptError):
    """Template does not exist in the pack."""


@dataclass(frozen=True)
class SlotSpec:
    """Declared slot: accepted value type(s) and whether it must be given."""

    type: type | tuple[type, ...] = str
    required: bool = True


@dataclass
class PromptTemplate:
    """A single prompt template with declared slots."""

    name: str
    content: str
    slots: dict[str, SlotSpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        used = set(_SLOT_RE.findall(self.content)) | {m.group(1) for m in _SECTION_RE.finditer(self.content)}
        undeclared = used - self.slots.keys()
        if undeclared:
            raise PromptError(f"Template '{self.name}' uses undeclared slots: {sorted(undeclared)}")

    def render(self, **kwargs: Any) -> str:
        """Render the template.

        Raises:
            PromptError: missing required slot, unknown slot, or wrong type
        """
        unknown = kwargs.keys() - self.slots.keys()
        if unknown:
            raise PromptError(f"Unknown variables for '{self.name}': {sorted(unknown)}")

        for slot_name, slot in self.slots.items():
            value = kwargs.get(slot_name)
            if value is None:
                if slot.required:
                    raise PromptError(f"Missing required variable: {slot_name}")
                continue
            if not isinstance(value, slot.type):
                raise PromptError(
                    f"Variable '{slot_name}' expects {slot.type}, got {type(value).__name__}"
                )

        def section(match: re.Match[str]) -> str:
            return match.group(2) if kwargs.get(match.group(1)) else ""

        def slot(match: re.Match[str]) -> str:
            value = kwargs.get(match.group(1))
            return "" if value is None else str(value)

        result = _SECTION_RE.sub(section, self.content)
        return _SLOT_RE.sub(slot, result)


@dataclass
class PromptPack:
    """Named collection of templates."""

    pack_id: str
    prompts: dict[str, PromptTemplate] = field(default_factory=dict)

    def get_prompt(self, name: str) -> PromptTemplate:
        if name not in self.prompts:
            raise PromptNotFoundError(f"No prompt '{name}' in pack '{self.pack_id}'")
        return self.prompts[name]

    def render_prompt(self, name: str, **kwargs: Any) -> str:
        return self.get_prompt(name).render(**kwargs)
