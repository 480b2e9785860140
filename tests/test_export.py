import csv
import io
import json

import pytest

from src.schemas.flashcards import Flashcard
from src.services.export import deck_filename, export_to_anki, export_to_anki_json


def read_rows(content):
    return list(csv.reader(io.StringIO(content)))


@pytest.mark.unit
class TestAnkiCSV:
    def test_empty_input_is_a_no_op(self):
        assert export_to_anki([], "Biology") is None

    def test_header_plus_one_row_per_card(self):
        cards = [Flashcard(front=f"Q{i}", back=f"A{i}", tags=["bio"]) for i in range(4)]

        export = export_to_anki(cards, "Biology")
        rows = read_rows(export.content)

        assert rows[0] == ["Front", "Back", "Tags", "Deck"]
        assert len(rows) == 5
        assert rows[1] == ["Q0", "A0", "bio", "Biology"]
        assert export.filename == "Biology_anki_cards.csv"
        assert export.media_type.startswith("text/csv")

    def test_embedded_punctuation_survives(self):
        card = Flashcard(
            front='What does "ATP" stand for, exactly?',
            back="Adenosine\ntriphosphate, the cell's \"energy\" currency",
            tags=["biology", "energy"],
        )

        rows = read_rows(export_to_anki([card], "Cells").content)

        front, back, tags, deck = rows[1]
        assert front == card.front
        assert back == card.back
        assert tags.split(" ") == card.tags
        assert deck == "Cells"

    def test_default_tag_only_when_tags_missing(self):
        cards = [Flashcard(front="Q1", back="A1"), Flashcard(front="Q2", back="A2", tags=[])]

        rows = read_rows(export_to_anki(cards, "Deck", default_tag="studycards").content)

        assert rows[1][2] == "studycards"
        assert rows[2][2] == ""


@pytest.mark.unit
class TestDeckFilename:
    def test_unsafe_characters_are_replaced(self):
        assert deck_filename("Bio 101: Cells/Tissues", ".csv") == "Bio_101__Cells_Tissues.csv"

    def test_arabic_letters_are_kept(self):
        assert deck_filename("علم الأحياء", ".csv") == "علم_الأحياء.csv"


@pytest.mark.unit
class TestAnkiJSON:
    def test_empty_input(self):
        assert export_to_anki_json([], "Biology") is None

    def test_deck_document(self):
        cards = [Flashcard(front="Q1", back="A1"), Flashcard(front="Q2", back="A2", tags=["x"], difficulty="hard")]

        export = export_to_anki_json(cards, "Biology", default_tag="studycards", source_label="StudyCards")
        deck = json.loads(export.content)

        assert export.filename == "Biology_deck.json"
        assert deck["name"] == "Biology"
        assert deck["metadata"]["total_cards"] == 2
        assert deck["metadata"]["source"] == "StudyCards"
        assert deck["metadata"]["version"] == "1.0"
        assert deck["cards"][0]["id"] == "card_0"
        assert deck["cards"][0]["tags"] == ["studycards"]
        assert deck["cards"][1]["difficulty"] == "hard"
        assert deck["cards"][1]["tags"] == ["x"]


@pytest.mark.unit
def test_save_writes_file(tmp_path):
    export = export_to_anki([Flashcard(front="Q", back="A")], "Deck")

    path = export.save(tmp_path / "exports")

    assert path.read_text(encoding="utf-8") == export.content
