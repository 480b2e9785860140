import json
import logging
import re
from enum import Enum
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from src.exceptions import ValidationError
from src.schemas.flashcards import GeneratedFlashcard

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

FENCE_PATTERN = re.compile(r"^\s*```(?:json)?[ \t]*\n?(.*?)\n?[ \t]*```\s*$", re.IGNORECASE | re.DOTALL)


class FlashcardLevel(str, Enum):
    BASIC = "basic"
    ADVANCED = "advanced"
    COMPREHENSIVE = "comprehensive"


class CardFormat(str, Enum):
    QA = "qa"
    CLOZE = "cloze"
    MCQ = "mcq"
    TRUE_FALSE = "true_false"


LEVEL_CARD_COUNTS = {
    FlashcardLevel.BASIC: 10,
    FlashcardLevel.ADVANCED: 15,
    FlashcardLevel.COMPREHENSIVE: 25,
}

FORMAT_INSTRUCTIONS = {
    CardFormat.QA: "Create 10 flashcards as question and answer pairs.",
    CardFormat.CLOZE: (
        "Create 10 fill-in-the-blank (cloze) flashcards. Use the standard Anki syntax "
        "{{c1::word}} in the \"front\" field."
    ),
    CardFormat.MCQ: (
        "Create 10 multiple-choice flashcards. The \"front\" field holds the question and the "
        "\"back\" field lists the options and marks the correct answer."
    ),
    CardFormat.TRUE_FALSE: (
        "Create 10 true/false flashcards. The \"front\" field holds the statement and the "
        "\"back\" field says \"True\" or \"False\" with a short explanation."
    ),
}

CARD_EXAMPLE = """[
  {
    "front": "Question here",
    "back": "Answer here",
    "difficulty": "easy",
    "category": "General",
    "tags": ["tag1", "tag2"]
  }
]"""

ADVANCED_CARD_EXAMPLE = """[
  {
    "front": "Question here",
    "back": "Detailed answer here",
    "difficulty": "medium",
    "category": "Content category",
    "tags": ["tag1", "tag2", "tag3"],
    "explanation": "Additional explanation of the answer",
    "examples": ["Example 1", "Example 2"]
  }
]"""

DOCUMENT_ANALYSIS_EXAMPLE = """{
  "mainSummary": "...",
  "keyPoints": ["..."],
  "mindMap": {"topic": "...", "branches": [{"title": "...", "points": ["..."], "note": "..."}]},
  "studyTips": ["..."],
  "examPreparation": ["..."],
  "difficultyConcepts": [{"concept": "...", "explanation": "...", "level": "easy|medium|hard"}],
  "timeEstimate": {"studyTime": "...", "reviewTime": "...", "practiceTime": "..."},
  "relatedTopics": ["..."],
  "practiceQuestions": [{"question": "...", "type": "multiple-choice|essay|short-answer", "difficulty": "easy|medium|hard"}],
  "keyTermsGlossary": [{"term": "...", "definition": "...", "importance": "high|medium|low"}],
  "learningObjectives": ["..."],
  "commonMistakes": [{"mistake": "...", "correction": "...", "tip": "..."}]
}"""


class StudyPromptBuilder:
    """Builds prompts and system instructions for each study task."""

    def __init__(self, language: str = "Arabic"):
        self.language = language

    def _language_rule(self) -> str:
        return f"Write all generated content in {self.language}."

    # System instructions

    def flashcard_system_prompt(self) -> str:
        return "You are an expert at creating educational flashcards. Respond with valid JSON only, without any extra text."

    def summary_system_prompt(self) -> str:
        return "You are an expert at analysing and summarising texts. Respond with valid JSON only."

    def analysis_system_prompt(self) -> str:
        return "You are an expert study coach who turns documents into structured study material. Respond with valid JSON only."

    def chat_system_prompt(self) -> str:
        return (
            "You are a patient tutor helping a student understand their study material. "
            f"Answer in {self.language} unless asked otherwise."
        )

    # Task prompts

    def summary_prompt(self, content: str) -> str:
        return (
            "Analyse and summarise the following text:\n\n"
            f"{content}\n\n"
            "I need:\n"
            "1. A comprehensive summary of the text (3-4 paragraphs)\n"
            "2. The main key points (5-8 points)\n"
            "3. A clear and useful presentation of the analysis\n\n"
            f"{self._language_rule()}\n"
            "The answer must be JSON in this format:\n"
            '{\n  "summary": "The comprehensive summary here",\n  "keyPoints": ["First point", "Second point"]\n}'
        )

    def flashcards_prompt(self, content: str, level: FlashcardLevel = FlashcardLevel.BASIC) -> str:
        level = FlashcardLevel(level)
        count = LEVEL_CARD_COUNTS[level]
        if level is FlashcardLevel.BASIC:
            header = f"Analyse this text and create {count} basic flashcards."
            example = CARD_EXAMPLE
            rules = ""
        elif level is FlashcardLevel.ADVANCED:
            header = f"Analyse this text and create {count} advanced flashcards with varied difficulty levels."
            example = ADVANCED_CARD_EXAMPLE
            rules = "\nMake sure to vary the difficulty levels: easy, medium, hard."
        else:
            header = f"Analyse this text and create {count} comprehensive and varied flashcards."
            example = ADVANCED_CARD_EXAMPLE
            rules = (
                "\nMake sure to:\n"
                "- vary the question types (definition, application, analysis, evaluation)\n"
                "- cover every important point in the text\n"
                "- add practical examples wherever possible"
            )

        return (
            f"{header}\n\n"
            f"Text: {content}\n\n"
            f"{self._language_rule()}\n"
            f"The answer must be JSON only, in this format:\n{example}"
            f"{rules}"
        )

    def summary_flashcards_prompt(self, summary: str, key_points: List[str], card_format: CardFormat = CardFormat.QA) -> str:
        card_format = CardFormat(card_format)
        numbered = "\n".join(f"{i}. {point}" for i, point in enumerate(key_points, 1))
        return (
            f"{FORMAT_INSTRUCTIONS[card_format]}\n\n"
            "Base the cards on this analysis of the text:\n"
            f"Summary: {summary}\n"
            f"Key points:\n{numbered}\n\n"
            f"{self._language_rule()}\n"
            f"The answer must be JSON only, in this format:\n{CARD_EXAMPLE}"
        )

    def single_card_prompt(self, content: str) -> str:
        return (
            "Create a single educational flashcard from the following content:\n\n"
            f"{content}\n\n"
            f"{self._language_rule()}\n"
            "The answer must be JSON only, in this format:\n"
            '{"front": "Question", "back": "Answer", "difficulty": "easy|medium|hard", "tags": ["tag"]}'
        )

    def document_analysis_prompt(self, content: str) -> str:
        return (
            "Analyse the following document as study material. Produce a main summary, key points, "
            "a mind map, study tips, exam preparation advice, difficult concepts, a time estimate, "
            "related topics, practice questions, a glossary of key terms, learning objectives "
            "and common mistakes.\n\n"
            f"Document:\n{content}\n\n"
            f"{self._language_rule()}\n"
            f"The answer must be JSON only, in this format:\n{DOCUMENT_ANALYSIS_EXAMPLE}"
        )

    def chat_prompt(self, message: str, context: str | None = None) -> str:
        if not context:
            return message
        return f"Based on the following content:\n\n{context}\n\nAnswer the following question: {message}"


class ResponseParser:
    """Parses JSON answers from LLM output."""

    @staticmethod
    def strip_fences(response: str) -> str:
        """Removes a wrapping markdown code fence; fences inside the payload are kept."""
        match = FENCE_PATTERN.match(response)
        return (match.group(1) if match else response).strip()

    @staticmethod
    def load_json(response: str) -> Any:
        cleaned = ResponseParser.strip_fences(response)
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to decode LLM response as JSON: {e.msg}; preview={cleaned[:200]!r}")
            raise ValidationError(f"AI response is not valid JSON: {e.msg}") from e

    @staticmethod
    def parse_model(response: str, model: Type[T]) -> T:
        data = ResponseParser.load_json(response)
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"LLM response failed schema validation: {e}")
            raise ValidationError(f"AI response does not match the expected format: {e.error_count()} error(s)") from e

    @staticmethod
    def parse_flashcards(response: str) -> List[GeneratedFlashcard]:
        """Accepts a bare array or an object wrapping it under ``flashcards``/``cards``."""
        data = ResponseParser.load_json(response)
        if isinstance(data, dict):
            for key in ("flashcards", "cards"):
                if isinstance(data.get(key), list):
                    data = data[key]
                    break
        if not isinstance(data, list):
            raise ValidationError("AI response is not a list of flashcards")
        try:
            return TypeAdapter(List[GeneratedFlashcard]).validate_python(data)
        except PydanticValidationError as e:
            logger.warning(f"Flashcards failed schema validation: {e}")
            raise ValidationError(f"Invalid flashcard format: {e.error_count()} error(s)") from e
