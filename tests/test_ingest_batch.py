import pytest

from scripts.ingest_batch import load_records


class TestLoadRecords:

    def test_csv_headers_are_normalised(self, tmp_path):
        path = tmp_path / "export.csv"
        path.write_text("Name,Current Title,Phone\nOmar Said,Illustrator,01001234567\nMona Adel,,\n")

        records = load_records(str(path))

        assert records[0] == {"name": "Omar Said", "current_title": "Illustrator", "phone": "01001234567"}
        assert records[1]["current_title"] is None
        assert records[1]["phone"] is None

    def test_jsonl(self, tmp_path):
        path = tmp_path / "export.jsonl"
        path.write_text('{"full_name": "Jane Doe", "skills": ["Figma"]}\n{"full_name": "Omar Said"}\n')

        records = load_records(str(path))

        assert records[0]["skills"] == ["Figma"]
        assert records[1]["skills"] is None

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "export.xlsx"
        path.write_bytes(b"")
        with pytest.raises(ValueError):
            load_records(str(path))
