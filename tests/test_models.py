"""Tests for AlbumItem parsing and id normalization."""
import pytest

from dimagram.core.errors import SerializationError
from dimagram.models.album import AlbumItem, normalize_id


class TestNormalizeId:
    @pytest.mark.parametrize("raw,expected", [(7, "7"), (7.0, "7"), ("abc", "abc"), (" 12 ", "12")])
    def test_canonical_string(self, raw, expected):
        assert normalize_id(raw) == expected

    @pytest.mark.parametrize("raw", [None, True, "", "  ", 1.5, [1], {"a": 1}])
    def test_rejects_invalid(self, raw):
        with pytest.raises(SerializationError):
            normalize_id(raw)


class TestAlbumItem:
    def test_numeric_and_string_ids_compare_equal(self):
        a = AlbumItem.from_dict({"id": 1, "url": "a"})
        b = AlbumItem.from_dict({"id": "1", "url": "a"})
        assert a == b

    def test_optional_fields_serialize_as_empty_text(self):
        item = AlbumItem(id="1", url="https://cdn/x.jpg")
        assert item.to_dict() == {
            "id": "1",
            "url": "https://cdn/x.jpg",
            "description": "",
            "credits": "",
        }

    def test_keeps_description_and_credits(self):
        item = AlbumItem.from_dict(
            {"id": "9", "url": "u", "description": "sunset", "credits": "me"}
        )
        assert item.description == "sunset"
        assert item.credits == "me"

    def test_missing_url_is_rejected(self):
        with pytest.raises(SerializationError, match="no url"):
            AlbumItem.from_dict({"id": "1"})

    def test_missing_id_is_rejected(self):
        with pytest.raises(SerializationError, match="missing 'id'"):
            AlbumItem.from_dict({"url": "a"})

    def test_non_object_is_rejected(self):
        with pytest.raises(SerializationError):
            AlbumItem.from_dict(["1", "a"])

    def test_non_text_description_is_rejected(self):
        with pytest.raises(SerializationError):
            AlbumItem.from_dict({"id": "1", "url": "a", "description": 3})
