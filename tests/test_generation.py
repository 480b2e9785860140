import json
from unittest.mock import MagicMock

import pytest

from src.config import AISettings
from src.exceptions import ValidationError
from src.services.ai.prompts import CardFormat, FlashcardLevel
from src.services.generation import MAX_CONTENT_CHARS, StudyGenerator


@pytest.fixture
def ai():
    client = MagicMock()
    client.settings = AISettings()
    return client


@pytest.fixture
def generator(ai):
    return StudyGenerator(ai)


@pytest.mark.unit
class TestFlashcardGeneration:
    def test_cards_are_normalized(self, ai, generator):
        ai.make_request.return_value = json.dumps(
            [
                {
                    "front": "  What is ATP?  ",
                    "back": "Energy currency",
                    "difficulty": "HARD",
                    "tags": ["biology", " ", "cells "],
                    "explanation": "Produced in mitochondria",
                },
                {"front": "Define osmosis", "back": "Water diffusion", "difficulty": "trivial"},
            ]
        )

        cards = generator.generate_flashcards("Cell biology notes", FlashcardLevel.ADVANCED)

        assert len(cards) == 2
        assert cards[0].front == "What is ATP?"
        assert cards[0].back == "Energy currency\n\nProduced in mitochondria"
        assert cards[0].difficulty == "hard"
        assert cards[0].tags == ["biology", "cells"]
        assert cards[0].type == "basic"
        assert cards[0].id is None
        assert cards[1].difficulty == "medium"
        assert cards[1].tags is None

        prompt = ai.make_request.call_args.args[0]
        assert "create 15" in prompt
        assert "JSON" in ai.make_request.call_args.kwargs["system_prompt"]

    def test_cloze_format_sets_card_type(self, ai, generator):
        ai.make_request.return_value = '[{"front": "The {{c1::mitochondria}} makes ATP", "back": "mitochondria"}]'

        cards = generator.generate_flashcards_from_summary("summary", ["point"], CardFormat.CLOZE)

        assert cards[0].type == "cloze"

    def test_cloze_syntax_is_detected_for_any_format(self, ai, generator):
        ai.make_request.return_value = '[{"front": "{{c1::Paris}} is the capital of France", "back": "Paris"}]'

        cards = generator.generate_flashcards("Geography")

        assert cards[0].type == "cloze"

    def test_mcq_format(self, ai, generator):
        ai.make_request.return_value = '[{"front": "2 + 2?", "back": "a) 3 b) 4 (correct)"}]'

        cards = generator.generate_flashcards_from_summary("summary", [], "mcq")

        assert cards[0].type == "mcq"

    def test_card_without_front_is_rejected(self, ai, generator):
        ai.make_request.return_value = '[{"front": "", "back": "orphan answer"}]'

        with pytest.raises(ValidationError):
            generator.generate_flashcards("notes")

    def test_single_card(self, ai, generator):
        ai.make_request.return_value = '{"front": "What is DNA?", "back": "Genetic material", "difficulty": "easy"}'

        card = generator.generate_card("DNA carries genetic information")

        assert card.front == "What is DNA?"
        assert card.difficulty == "easy"


@pytest.mark.unit
class TestContentChecks:
    def test_empty_content_makes_no_call(self, ai, generator):
        with pytest.raises(ValidationError):
            generator.generate_flashcards("   ")
        ai.make_request.assert_not_called()

    def test_oversized_content(self, ai, generator):
        with pytest.raises(ValidationError, match="too long"):
            generator.summarize("x" * (MAX_CONTENT_CHARS + 1))
        ai.make_request.assert_not_called()


@pytest.mark.unit
def test_summarize(ai, generator):
    ai.make_request.return_value = '```json\n{"summary": "Plants make food", "keyPoints": ["light", "water"]}\n```'

    result = generator.summarize("Photosynthesis lecture transcript")

    assert result.summary == "Plants make food"
    assert result.key_points == ["light", "water"]


@pytest.mark.unit
def test_analyze_document(ai, generator):
    ai.make_request.return_value = '{"mainSummary": "Overview", "keyPoints": ["a"], "studyTips": ["review daily"]}'

    analysis = generator.analyze_document("Long document")

    assert analysis.main_summary == "Overview"
    assert analysis.study_tips == ["review daily"]


@pytest.mark.unit
def test_chat_passes_context(ai, generator):
    ai.make_request.return_value = "ATP is the energy currency of the cell."

    reply = generator.chat("What is ATP?", context="Lecture on cellular respiration")

    assert reply == "ATP is the energy currency of the cell."
    assert "Lecture on cellular respiration" in ai.make_request.call_args.args[0]
