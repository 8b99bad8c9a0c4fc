"""Tests for pdfmanager.core.field_ops -- buffer value coercion."""

import pytest

from pdfmanager.core.field_ops import FieldDef, FieldType, coerce_value

STRING = FieldDef(FieldType.STRING, "")
INT = FieldDef(FieldType.INT, "")
LIST = FieldDef(FieldType.STRING_LIST, "")


class TestCoerceValue:
    def test_none_passes_through(self):
        assert coerce_value(None, INT) is None
        assert coerce_value(None, LIST) is None

    def test_string(self):
        assert coerce_value("hello", STRING) == "hello"

    def test_string_from_number(self):
        assert coerce_value(12, STRING) == "12"

    def test_int_valid(self):
        assert coerce_value("42", INT) == 42

    def test_int_with_whitespace(self):
        assert coerce_value(" 1999 ", INT) == 1999

    def test_int_passthrough(self):
        assert coerce_value(7, INT) == 7

    @pytest.mark.parametrize("raw", ["nope", "19.5", "", True])
    def test_int_invalid(self, raw):
        with pytest.raises(ValueError, match="Expected integer"):
            coerce_value(raw, INT)

    def test_list_passthrough(self):
        assert coerce_value(["a", "b"], LIST) == ["a", "b"]

    def test_list_from_tuple(self):
        assert coerce_value(("a", "b"), LIST) == ["a", "b"]

    def test_list_comma_separated(self):
        assert coerce_value("a, b,,c ", LIST) == ["a", "b", "c"]

    def test_list_json_array(self):
        assert coerce_value('["Ada", "Grace"]', LIST) == ["Ada", "Grace"]

    def test_list_single_value(self):
        assert coerce_value("Knuth", LIST) == ["Knuth"]
