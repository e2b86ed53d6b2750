"""Tests for vetify.db.types.JSONList custom SQLAlchemy column type."""

import json

import pytest

from vetify.db.types import JSONList

# The dialect parameter is not used by JSONList, so None is a valid stand-in.
DIALECT = None


class TestJSONListBindParam:
    def setup_method(self):
        self.jtype = JSONList()

    def test_list_serialised_to_json_string(self):
        result = self.jtype.process_bind_param(["read:pets", "write:pets"], DIALECT)
        assert isinstance(result, str)
        assert json.loads(result) == ["read:pets", "write:pets"]

    def test_tuple_serialised_as_array(self):
        result = self.jtype.process_bind_param(("read:pets",), DIALECT)
        assert json.loads(result) == ["read:pets"]

    def test_none_returns_none(self):
        assert self.jtype.process_bind_param(None, DIALECT) is None

    def test_empty_list(self):
        assert self.jtype.process_bind_param([], DIALECT) == "[]"

    @pytest.mark.parametrize("value", ["read:pets", {"a": 1}, 42])
    def test_non_sequences_rejected(self, value):
        with pytest.raises(TypeError):
            self.jtype.process_bind_param(value, DIALECT)


class TestJSONListResultValue:
    def setup_method(self):
        self.jtype = JSONList()

    def test_json_array_deserialised(self):
        assert self.jtype.process_result_value('["read:pets"]', DIALECT) == ["read:pets"]

    def test_none_returns_none(self):
        assert self.jtype.process_result_value(None, DIALECT) is None

    def test_invalid_json_raises(self):
        with pytest.raises(json.JSONDecodeError):
            self.jtype.process_result_value("not json", DIALECT)


class TestJSONListCacheOk:
    def test_cache_ok_is_true(self):
        assert JSONList.cache_ok is True
