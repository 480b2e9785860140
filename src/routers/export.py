import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Response, status

from src.dependencies import SettingsDep
from src.schemas.api.flashcards import ExportRequest
from src.services.export import AnkiExport, export_to_anki, export_to_anki_json

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])


def download_response(export: Optional[AnkiExport]) -> Response:
    """Wrap a rendered export as a file download; 422 when there was nothing to export."""
    if export is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No flashcards to export",
        )
    # RFC 5987 form so non-latin deck names survive the header encoding
    disposition = f"attachment; filename*=UTF-8''{quote(export.filename)}"
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": disposition},
    )


@router.post("/anki")
def export_anki_csv(request: ExportRequest, settings: SettingsDep):
    """Anki-importable CSV with Front, Back, Tags and Deck columns."""
    deck_name = request.deck_name or settings.export.default_deck_name
    export = export_to_anki(request.cards, deck_name, default_tag=settings.export.default_tag)
    if export:
        logger.info(f"Exported {len(request.cards)} cards to {export.filename}")
    return download_response(export)


@router.post("/anki-json")
def export_anki_json(request: ExportRequest, settings: SettingsDep):
    deck_name = request.deck_name or settings.export.default_deck_name
    export = export_to_anki_json(
        request.cards,
        deck_name,
        default_tag=settings.export.default_tag,
        source_label=settings.export.source_label,
    )
    if export:
        logger.info(f"Exported {len(request.cards)} cards to {export.filename}")
    return download_response(export)
