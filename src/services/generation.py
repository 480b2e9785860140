import logging
from typing import List, Optional

from src.exceptions import ValidationError
from src.schemas.ai import DocumentAnalysis, SummaryResult
from src.schemas.flashcards import Difficulty, Flashcard, FlashcardType, GeneratedFlashcard
from src.services.ai.client import AIClient
from src.services.ai.prompts import CardFormat, FlashcardLevel, ResponseParser, StudyPromptBuilder

logger = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 100_000

FORMAT_CARD_TYPES = {
    CardFormat.CLOZE: FlashcardType.CLOZE,
    CardFormat.MCQ: FlashcardType.MCQ,
}


class StudyGenerator:
    """Turns ingested content into summaries, analyses and flashcards."""

    def __init__(
        self,
        ai_client: AIClient,
        prompt_builder: Optional[StudyPromptBuilder] = None,
        parser: Optional[ResponseParser] = None,
    ):
        self.ai = ai_client
        self.prompts = prompt_builder or StudyPromptBuilder(ai_client.settings.response_language)
        self.parser = parser or ResponseParser()

    def summarize(self, content: str) -> SummaryResult:
        content = self._require_content(content)
        raw = self.ai.make_request(
            self.prompts.summary_prompt(content),
            system_prompt=self.prompts.summary_system_prompt(),
        )
        return self.parser.parse_model(raw, SummaryResult)

    def generate_flashcards(self, content: str, level: FlashcardLevel | str = FlashcardLevel.BASIC) -> List[Flashcard]:
        content = self._require_content(content)
        raw = self.ai.make_request(
            self.prompts.flashcards_prompt(content, FlashcardLevel(level)),
            system_prompt=self.prompts.flashcard_system_prompt(),
        )
        cards = [self._normalize(card) for card in self.parser.parse_flashcards(raw)]
        logger.info(f"Generated {len(cards)} flashcards (level={FlashcardLevel(level).value})")
        return cards

    def generate_flashcards_from_summary(
        self,
        summary: str,
        key_points: List[str],
        card_format: CardFormat | str = CardFormat.QA,
    ) -> List[Flashcard]:
        summary = self._require_content(summary)
        card_format = CardFormat(card_format)
        raw = self.ai.make_request(
            self.prompts.summary_flashcards_prompt(summary, key_points, card_format),
            system_prompt=self.prompts.flashcard_system_prompt(),
        )
        card_type = FORMAT_CARD_TYPES.get(card_format, FlashcardType.BASIC)
        cards = [self._normalize(card, card_type) for card in self.parser.parse_flashcards(raw)]
        logger.info(f"Generated {len(cards)} flashcards from summary (format={card_format.value})")
        return cards

    def generate_card(self, content: str) -> Flashcard:
        content = self._require_content(content)
        raw = self.ai.make_request(
            self.prompts.single_card_prompt(content),
            system_prompt=self.prompts.flashcard_system_prompt(),
        )
        card = self.parser.parse_model(raw, GeneratedFlashcard)
        return self._normalize(card)

    def analyze_document(self, content: str) -> DocumentAnalysis:
        content = self._require_content(content)
        raw = self.ai.make_request(
            self.prompts.document_analysis_prompt(content),
            system_prompt=self.prompts.analysis_system_prompt(),
        )
        return self.parser.parse_model(raw, DocumentAnalysis)

    def chat(self, message: str, context: Optional[str] = None) -> str:
        message = self._require_content(message)
        return self.ai.make_request(
            self.prompts.chat_prompt(message, context),
            system_prompt=self.prompts.chat_system_prompt(),
        )

    def _require_content(self, content: str) -> str:
        if not content or not content.strip():
            raise ValidationError("Content must not be empty")
        content = content.strip()
        if len(content) > MAX_CONTENT_CHARS:
            raise ValidationError(f"Content too long ({len(content)} > {MAX_CONTENT_CHARS} characters)")
        return content

    def _normalize(self, card: GeneratedFlashcard, card_type: FlashcardType = FlashcardType.BASIC) -> Flashcard:
        front = (card.front or "").strip()
        if not front:
            raise ValidationError("AI returned a flashcard without a front side")

        back = (card.back or "").strip()
        if card.explanation and card.explanation.strip() not in back:
            back = f"{back}\n\n{card.explanation.strip()}" if back else card.explanation.strip()

        difficulty = (card.difficulty or "").strip().lower()
        if difficulty not in {d.value for d in Difficulty}:
            difficulty = Difficulty.MEDIUM.value

        # cloze syntax on the front marks a cloze card whatever format was asked for
        if "{{c" in front and "::" in front:
            card_type = FlashcardType.CLOZE

        tags = [t.strip() for t in card.tags or [] if t and t.strip()] or None
        return Flashcard(
            front=front,
            back=back,
            type=card_type,
            difficulty=difficulty,
            tags=tags,
            category=card.category,
            source=card.source,
        )
