import csv
import io
import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

from src.schemas.flashcards import Flashcard

ANKI_CSV_HEADER = ["Front", "Back", "Tags", "Deck"]
EXPORT_FORMAT_VERSION = "1.0"

# Latin letters, digits and the Arabic block survive in file names
_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9\u0600-\u06FF]")


class AnkiExport(BaseModel):
    """A rendered export ready to be offered as a file download."""

    filename: str
    content: str
    media_type: str

    def save(self, directory: str | Path) -> Path:
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.content, encoding="utf-8")
        return path


def deck_filename(deck_name: str, suffix: str) -> str:
    return f"{_FILENAME_UNSAFE.sub('_', deck_name)}{suffix}"


def export_to_anki(cards: List[Flashcard], deck_name: str, default_tag: str = "studycards") -> Optional[AnkiExport]:
    """Render cards as an Anki-importable CSV (Front, Back, Tags, Deck).

    Returns ``None`` for an empty card list.
    """
    if not cards:
        return None

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(ANKI_CSV_HEADER)
    for card in cards:
        tags = " ".join(card.tags) if card.tags is not None else default_tag
        writer.writerow([card.front, card.back or "", tags, deck_name])

    return AnkiExport(
        filename=deck_filename(deck_name, "_anki_cards.csv"),
        content=output.getvalue(),
        media_type="text/csv; charset=utf-8",
    )


def export_to_anki_json(
    cards: List[Flashcard],
    deck_name: str,
    default_tag: str = "studycards",
    source_label: str = "StudyCards",
) -> Optional[AnkiExport]:
    if not cards:
        return None

    now = datetime.now(timezone.utc).isoformat()
    deck = {
        "name": deck_name,
        "cards": [
            {
                "id": str(card.id) if card.id else f"card_{index}",
                "front": card.front,
                "back": card.back,
                "tags": card.tags if card.tags is not None else [default_tag],
                "difficulty": card.difficulty,
                "type": card.type,
                "created_at": card.created_at.isoformat() if card.created_at else now,
            }
            for index, card in enumerate(cards)
        ],
        "metadata": {
            "source": source_label,
            "exported_at": now,
            "total_cards": len(cards),
            "version": EXPORT_FORMAT_VERSION,
        },
    }
    return AnkiExport(
        filename=deck_filename(deck_name, "_deck.json"),
        content=json.dumps(deck, indent=2, ensure_ascii=False),
        media_type="application/json; charset=utf-8",
    )
