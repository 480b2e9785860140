import logging

from fastapi import APIRouter, HTTPException, status

from src.dependencies import AIClientDep, GeneratorDep
from src.exceptions import (
    ConfigurationError,
    ProviderError,
    StudyCardsError,
    TranscriptUnavailableError,
    ValidationError,
    YouTubeError,
)
from src.schemas.ai import DocumentAnalysis, SummaryResult
from src.schemas.api.ai import (
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    ContentRequest,
    FlashcardGenerationRequest,
    FlashcardsResponse,
    SummaryFlashcardsRequest,
    TranscriptionRequest,
    TranscriptionResponse,
)
from src.schemas.flashcards import Flashcard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


def to_http_exception(error: StudyCardsError) -> HTTPException:
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))
    if isinstance(error, ProviderError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    if isinstance(error, TranscriptUnavailableError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, YouTubeError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


@router.post("/complete", response_model=CompletionResponse)
def complete(request: CompletionRequest, client: AIClientDep):
    """Forward a raw prompt to the selected provider."""
    try:
        text = client.make_request(
            request.prompt,
            system_prompt=request.system_prompt,
            provider=request.provider,
            model=request.model,
        )
    except StudyCardsError as e:
        raise to_http_exception(e)
    return CompletionResponse(text=text)


@router.post("/summarize", response_model=SummaryResult, response_model_by_alias=False)
def summarize(request: ContentRequest, generator: GeneratorDep):
    try:
        return generator.summarize(request.content)
    except StudyCardsError as e:
        raise to_http_exception(e)


@router.post("/flashcards", response_model=FlashcardsResponse)
def generate_flashcards(request: FlashcardGenerationRequest, generator: GeneratorDep):
    """Generate a deck from a transcript or document; nothing is persisted."""
    try:
        cards = generator.generate_flashcards(request.content, request.level)
    except StudyCardsError as e:
        raise to_http_exception(e)
    return FlashcardsResponse(cards=cards, count=len(cards))


@router.post("/flashcards/from-summary", response_model=FlashcardsResponse)
def generate_flashcards_from_summary(request: SummaryFlashcardsRequest, generator: GeneratorDep):
    try:
        cards = generator.generate_flashcards_from_summary(request.summary, request.key_points, request.card_format)
    except StudyCardsError as e:
        raise to_http_exception(e)
    return FlashcardsResponse(cards=cards, count=len(cards))


@router.post("/card", response_model=Flashcard)
def generate_card(request: ContentRequest, generator: GeneratorDep):
    """Turn a single chat message or passage into one flashcard."""
    try:
        return generator.generate_card(request.content)
    except StudyCardsError as e:
        raise to_http_exception(e)


@router.post("/analyze", response_model=DocumentAnalysis, response_model_by_alias=False)
def analyze_document(request: ContentRequest, generator: GeneratorDep):
    try:
        return generator.analyze_document(request.content)
    except StudyCardsError as e:
        raise to_http_exception(e)


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, generator: GeneratorDep):
    try:
        reply = generator.chat(request.message, request.context)
    except StudyCardsError as e:
        raise to_http_exception(e)
    return ChatResponse(reply=reply)


@router.post("/transcribe", response_model=TranscriptionResponse)
def transcribe(request: TranscriptionRequest, client: AIClientDep):
    """Transcribe base64-encoded audio with Gemini."""
    try:
        text = client.transcribe_audio(request.audio, request.mime_type)
    except StudyCardsError as e:
        raise to_http_exception(e)
    return TranscriptionResponse(text=text)
