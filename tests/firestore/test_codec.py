"""Tests for storefront/firestore/codec.py"""

from datetime import datetime, timezone

import pytest

from storefront.firestore.codec import (
    SERVER_TIMESTAMP,
    decode_fields,
    decode_value,
    encode_fields,
    encode_value,
    format_timestamp,
)


class TestEncodeValue:
    def test_scalars(self):
        assert encode_value(None) == {"nullValue": None}
        assert encode_value("Silk") == {"stringValue": "Silk"}
        assert encode_value(4.5) == {"doubleValue": 4.5}

    def test_int_as_string(self):
        assert encode_value(4999) == {"integerValue": "4999"}

    def test_bool_is_not_an_integer(self):
        assert encode_value(True) == {"booleanValue": True}

    def test_datetime(self):
        value = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
        assert encode_value(value) == {"timestampValue": "2024-03-01T10:00:00.000000Z"}

    def test_nested(self):
        encoded = encode_value({"colors": ["Red", "Gold"]})
        assert encoded == {"mapValue": {"fields": {"colors": {"arrayValue": {"values": [
            {"stringValue": "Red"}, {"stringValue": "Gold"},
        ]}}}}}

    def test_nested_server_timestamp_rejected(self):
        with pytest.raises(TypeError):
            encode_value({"at": SERVER_TIMESTAMP})

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            encode_value(object())


class TestDecodeValue:
    def test_integer(self):
        assert decode_value({"integerValue": "12"}) == 12

    def test_timestamp_with_nanoseconds(self):
        value = decode_value({"timestampValue": "2024-03-01T10:00:00.123456789Z"})
        assert value == datetime(2024, 3, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)

    def test_empty_array(self):
        assert decode_value({"arrayValue": {}}) == []

    def test_map(self):
        assert decode_value({"mapValue": {"fields": {"a": {"booleanValue": False}}}}) == {"a": False}

    def test_reference(self):
        assert decode_value({"referenceValue": "projects/p/databases/d/documents/products/x"}).endswith("/x")


class TestFields:
    def test_server_timestamp_fields_split_out(self):
        fields, server_paths = encode_fields({
            "name": "Silk",
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        })
        assert fields == {"name": {"stringValue": "Silk"}}
        assert server_paths == ["createdAt", "updatedAt"]

    def test_decode_fields(self):
        assert decode_fields({"price": {"doubleValue": 1599.0}, "sku": {"stringValue": "X"}}) == {
            "price": 1599.0,
            "sku": "X",
        }

    def test_document_survives_encoding(self):
        data = {
            "name": "Teal Cotton Saree",
            "price": 1599,
            "rating": 4.5,
            "featured": False,
            "images": ["a.jpg"],
            "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        fields, _ = encode_fields(data)
        assert decode_fields(fields) == data


class TestFormatTimestamp:
    def test_naive_taken_as_utc(self):
        assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000000Z"

    def test_converts_offsets_to_utc(self):
        from datetime import timedelta
        ist = timezone(timedelta(hours=5, minutes=30))
        assert format_timestamp(datetime(2024, 1, 1, 5, 30, tzinfo=ist)) == "2024-01-01T00:00:00.000000Z"


class TestServerTimestamp:
    def test_singleton(self):
        assert type(SERVER_TIMESTAMP)() is SERVER_TIMESTAMP
        assert repr(SERVER_TIMESTAMP) == "SERVER_TIMESTAMP"
