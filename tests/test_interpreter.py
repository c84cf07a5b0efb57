"""Tests for free-text quote edits."""

from conftest import NOW

from lead_engine.engine.interpreter import (
    AddDiscount,
    AddService,
    RemoveService,
    prompt_interpreter,
)


class TestDiscount:
    def test_adds_ten_percent_of_subtotal(self, social_quote) -> None:
        edited = prompt_interpreter.apply(social_quote, "give me a discount", NOW)
        assert edited.discount == 3600
        assert edited.total == 14400
        assert edited.subtotal == 18000

    def test_stated_percentage_is_ignored(self, social_quote) -> None:
        edited = prompt_interpreter.apply(social_quote, "Give me a 25% discount", NOW)
        assert edited.discount == 3600

    def test_appends_note(self, social_quote) -> None:
        once = prompt_interpreter.apply(social_quote, "lower the price", NOW)
        twice = prompt_interpreter.apply(once, "lower it again", NOW)
        assert once.notes == "Additional discount applied."
        assert twice.notes == "Additional discount applied. | Additional discount applied."
        assert twice.discount == 5400


class TestAddService:
    def test_adds_by_category(self, social_quote) -> None:
        edited = prompt_interpreter.apply(social_quote, "add SEO please", NOW)
        assert edited.service_names[-1] == "Local SEO"
        assert edited.subtotal == 23000
        assert edited.total == 21200

    def test_skips_services_already_quoted(self, social_quote) -> None:
        once = prompt_interpreter.apply(social_quote, "include seo", NOW)
        twice = prompt_interpreter.apply(once, "include seo", NOW)
        assert twice.service_names[-2:] == ["Local SEO", "Full SEO"]
        assert twice.subtotal == 38000

    def test_adds_by_name(self, social_quote) -> None:
        edited = prompt_interpreter.apply(social_quote, "Include the CRM Setup too", NOW)
        assert "CRM Setup" in edited.service_names

    def test_nothing_named(self, social_quote) -> None:
        edited = prompt_interpreter.apply(social_quote, "add something nice", NOW)
        assert edited.service_names == social_quote.service_names


class TestRemoveService:
    def test_removes_named_line(self, social_quote) -> None:
        edited = prompt_interpreter.apply(social_quote, "remove the social basic pack", NOW)
        assert edited.service_names == ["Social Pro Pack"]
        assert edited.subtotal == 12000
        assert edited.total == 10200

    def test_spanish_keyword(self, social_quote) -> None:
        edited = prompt_interpreter.apply(social_quote, "quitar Social Pro Pack", NOW)
        assert edited.service_names == ["Social Basic Pack"]


class TestCombinedAndNoop:
    def test_branches_apply_in_sequence(self, social_quote) -> None:
        edited = prompt_interpreter.apply(social_quote, "add SEO and a discount", NOW)
        # Discount is taken on the subtotal before the new service is added
        assert edited.discount == 3600
        assert edited.subtotal == 23000
        assert edited.total == 19400

    def test_remove_sees_service_added_in_same_edit(self, social_quote) -> None:
        edited = prompt_interpreter.apply(
            social_quote, "add Local SEO, then remove Local SEO", NOW
        )
        assert edited.service_names == ["Social Pro Pack", "Social Basic Pack"]
        assert edited.subtotal == 18000
        assert edited.total == 16200
        assert prompt_interpreter.classify(
            social_quote, "add Local SEO, then remove Local SEO"
        ) == [AddService("seo-local"), RemoveService("Local SEO")]

    def test_unmatched_text_only_touches_timestamp(self, social_quote) -> None:
        later = NOW.replace(hour=18)
        edited = prompt_interpreter.apply(social_quote, "looks great", later)
        assert edited.updated_at == later
        assert edited.model_dump(exclude={"updated_at"}) == social_quote.model_dump(
            exclude={"updated_at"}
        )

    def test_input_quote_is_not_mutated(self, social_quote) -> None:
        before = social_quote.model_dump()
        prompt_interpreter.apply(social_quote, "remove social pro pack and add seo", NOW)
        assert social_quote.model_dump() == before

    def test_total_invariant_after_edits(self, social_quote) -> None:
        quote = social_quote
        for text in ["discount", "add branding", "remove social pro pack", "noop"]:
            quote = prompt_interpreter.apply(quote, text, NOW)
            assert quote.total == quote.subtotal - quote.discount


class TestClassify:
    def test_typed_instructions(self, social_quote) -> None:
        instructions = prompt_interpreter.classify(
            social_quote, "Add video marketing, remove Social Basic Pack and lower the price"
        )
        assert instructions == [
            AddDiscount(10.0),
            AddService("video-basic"),
            RemoveService("Social Basic Pack"),
        ]

    def test_no_keywords(self, social_quote) -> None:
        assert prompt_interpreter.classify(social_quote, "thanks!") == []
