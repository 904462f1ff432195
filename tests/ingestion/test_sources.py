"""Tests for storefront/ingestion/sources.py"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from storefront.ingestion.sources import (
    SAMPLE_PRODUCTS,
    fetch_records,
    load_records,
    load_records_from_file,
)


class TestLoadRecordsFromFile:
    def test_reads_json_array(self, tmp_path):
        path = tmp_path / "saree.json"
        path.write_text(json.dumps([{"name": "A"}, {"name": "B"}]), encoding="utf-8")
        assert load_records_from_file(str(path)) == [{"name": "A"}, {"name": "B"}]

    def test_drops_non_objects(self, tmp_path):
        path = tmp_path / "saree.json"
        path.write_text(json.dumps([{"name": "A"}, "junk", 3]), encoding="utf-8")
        assert load_records_from_file(str(path)) == [{"name": "A"}]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_records_from_file(str(tmp_path / "missing.json"))

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "saree.json"
        path.write_text(json.dumps({"name": "A"}), encoding="utf-8")
        with pytest.raises(ValueError, match="JSON array"):
            load_records_from_file(str(path))


class TestFetchRecords:
    def test_fetches_array(self):
        session = MagicMock()
        session.get.return_value.json.return_value = [{"name": "A"}]

        records = fetch_records("https://example.com/saree.json", session=session)

        assert records == [{"name": "A"}]
        session.get.assert_called_once_with("https://example.com/saree.json", timeout=30)
        session.close.assert_not_called()

    def test_http_error_propagates(self):
        session = MagicMock()
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")

        with pytest.raises(requests.HTTPError):
            fetch_records("https://example.com/missing.json", session=session)


class TestLoadRecords:
    def test_defaults_to_samples(self):
        records = load_records()
        assert len(records) == len(SAMPLE_PRODUCTS) == 5
        assert records[0]["name"] == "Magenta Silk Saree"

    def test_samples_are_copies(self):
        records = load_records()
        records[0]["name"] = "Changed"
        assert SAMPLE_PRODUCTS[0]["name"] == "Magenta Silk Saree"

    def test_file_takes_precedence(self, tmp_path):
        path = tmp_path / "saree.json"
        path.write_text("[]", encoding="utf-8")
        assert load_records(file=str(path), url="https://example.com") == []
