"""Built-in prompt pack for ticket-page descriptions."""

from seodesc.api.constants import BRAND_GUIDELINES

from .loader import PromptPack, PromptTemplate, SlotSpec

SYSTEM_PROMPT = """You are an expert SEO copywriter for a ticket aggregation platform.

Business model: {{businessModel}}

Tone of voice:
{{toneRules}}

Formatting:
{{formatRules}}

Avoid:
{{avoidRules}}

Always include:
{{includeRules}}

Write in {{language}}. Every description must be between {{minWords}} and {{maxWords}} words."""

DESCRIPTION_PROMPT = """Write an SEO page description for "{{pageName}}".

Requirements:
- Length: {{minWords}}-{{maxWords}} words
- Bold the first mention of "{{pageName}}"
- Use sentence case for any headings
- Keep the content evergreen: no dates, prices or time-sensitive details
- Use at most 1-2 exclamation points
{{#lengthFeedback}}
Length correction:
{{lengthFeedback}}
{{/lengthFeedback}}{{#searchVolume}}
Search demand: about {{searchVolume}} monthly searches (competition: {{competition}}, CPC: ${{cpc}}).
{{/searchVolume}}{{#competitorInsights}}
Competitor insights (use to differentiate, never copy):
{{competitorInsights}}
{{/competitorInsights}}
Return only the description text."""

COMPETITOR_ANALYSIS_PROMPT = """Analyze the top-ranking pages for the keyword "{{keyword}}".

{{competitorBlocks}}

Summarize in under 200 words:
1. Topics and angles every competitor covers
2. Gaps none of them address well
3. Tone and structure patterns worth avoiding or improving on

Return plain text bullet points."""


def _bullets(items: object) -> str:
    return "\n".join(f"- {item}" for item in items)  # type: ignore[attr-defined]


def brand_slots() -> dict[str, str]:
    """Brand guideline values rendered into the system prompt."""
    business = BRAND_GUIDELINES["business_model"]
    return {
        "businessModel": f"{business['type']}. {business['description']}. {business['emphasis']}.",  # type: ignore[index]
        "toneRules": _bullets(BRAND_GUIDELINES["tone"]),
        "formatRules": _bullets(BRAND_GUIDELINES["format"].values()),  # type: ignore[attr-defined]
        "avoidRules": _bullets(BRAND_GUIDELINES["avoid"]),
        "includeRules": _bullets(BRAND_GUIDELINES["include"]),
    }


DEFAULT_PACK = PromptPack(
    pack_id="seo-descriptions",
    prompts={
        "system": PromptTemplate(
            name="system",
            content=SYSTEM_PROMPT,
            slots={
                "businessModel": SlotSpec(),
                "toneRules": SlotSpec(),
                "formatRules": SlotSpec(),
                "avoidRules": SlotSpec(),
                "includeRules": SlotSpec(),
                "language": SlotSpec(),
                "minWords": SlotSpec(int),
                "maxWords": SlotSpec(int),
            },
        ),
        "description": PromptTemplate(
            name="description",
            content=DESCRIPTION_PROMPT,
            slots={
                "pageName": SlotSpec(),
                "minWords": SlotSpec(int),
                "maxWords": SlotSpec(int),
                "lengthFeedback": SlotSpec(required=False),
                "searchVolume": SlotSpec(str, required=False),
                "competition": SlotSpec(required=False),
                "cpc": SlotSpec(str, required=False),
                "competitorInsights": SlotSpec(required=False),
            },
        ),
        "competitor_analysis": PromptTemplate(
            name="competitor_analysis",
            content=COMPETITOR_ANALYSIS_PROMPT,
            slots={
                "keyword": SlotSpec(),
                "competitorBlocks": SlotSpec(),
            },
        ),
    },
)
