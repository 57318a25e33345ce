"""Typed prompt template tests."""

import pytest

from seodesc.api.prompts import DEFAULT_PACK, PromptError, PromptNotFoundError, PromptPack, PromptTemplate, SlotSpec


class TestPromptTemplate:
    def test_undeclared_slot_rejected_at_definition(self):
        with pytest.raises(PromptError, match="undeclared"):
            PromptTemplate(name="bad", content="Hello {{name}}", slots={})

    def test_render_slots_and_sections(self):
        template = PromptTemplate(
            name="greeting",
            content="Hello {{name}}.{{#extra}} Note: {{extra}}{{/extra}}",
            slots={"name": SlotSpec(), "extra": SlotSpec(required=False)},
        )

        assert template.render(name="fans") == "Hello fans."
        assert template.render(name="fans", extra="bring scarves") == "Hello fans. Note: bring scarves"

    def test_missing_required_slot(self):
        template = PromptTemplate(name="t", content="{{name}}", slots={"name": SlotSpec()})
        with pytest.raises(PromptError, match="Missing required variable: name"):
            template.render()

    def test_unknown_variable(self):
        template = PromptTemplate(name="t", content="{{name}}", slots={"name": SlotSpec()})
        with pytest.raises(PromptError, match="Unknown variables"):
            template.render(name="x", other="y")

    def test_type_checked(self):
        template = PromptTemplate(name="t", content="{{count}}", slots={"count": SlotSpec(int)})
        with pytest.raises(PromptError, match="expects"):
            template.render(count="350")


class TestPromptPack:
    def test_missing_prompt(self):
        with pytest.raises(PromptNotFoundError):
            PromptPack(pack_id="empty").get_prompt("system")


class TestDefaultPack:
    def test_system_prompt_carries_brand_rules(self):
        from seodesc.api.prompts import brand_slots

        rendered = DEFAULT_PACK.render_prompt("system", **brand_slots(), language="English", minWords=350, maxWords=500)

        assert "Ticket Aggregation Platform" in rendered
        assert "- Write as fellow fans, not corporate marketers" in rendered
        assert "between 350 and 500 words" in rendered

    def test_description_optional_sections_omitted(self):
        rendered = DEFAULT_PACK.render_prompt("description", pageName="Arsenal tickets", minWords=350, maxWords=500)

        assert '"Arsenal tickets"' in rendered
        assert "Search demand" not in rendered
        assert "Competitor insights" not in rendered
        assert "Length correction" not in rendered

    def test_description_all_sections(self):
        rendered = DEFAULT_PACK.render_prompt(
            "description",
            pageName="Arsenal tickets",
            minWords=350,
            maxWords=500,
            lengthFeedback="IMPORTANT: write more",
            searchVolume="50,000",
            competition="HIGH",
            cpc="1.25",
            competitorInsights="- Everyone covers seating",
        )

        assert "about 50,000 monthly searches (competition: HIGH, CPC: $1.25)" in rendered
        assert "IMPORTANT: write more" in rendered
        assert "- Everyone covers seating" in rendered
        assert "{{" not in rendered
