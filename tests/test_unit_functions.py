"""
Tests for value literals, comparisons and canonical functions.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from odata_filter.errors import InvalidInputKind
from odata_filter.filters import Leaf
from odata_filter.functions import (
    canonical_function,
    compare,
    compare_in,
    compare_map,
    compare_not_in,
    field_to_str,
    format_literal,
    functions,
    negate,
    normalise_value,
)

# =============================================================================
# Literals
# =============================================================================


class TestNormaliseValue:
    """Test value normalisation."""

    def test_text_is_quoted(self):
        """Test that text is single-quoted."""
        assert normalise_value("abc") == "'abc'"

    def test_embedded_quote_is_doubled(self):
        """Test that quotes inside text are escaped by doubling."""
        assert normalise_value("O'Neil") == "'O''Neil'"

    @pytest.mark.parametrize("value", [1, 1.5, Decimal("2.50"), True, None])
    def test_other_values_pass_through(self, value):
        """Test that non-text, non-date values are returned as-is."""
        assert normalise_value(value) is value

    def test_naive_datetime(self):
        """Test that naive datetimes are rendered as UTC."""
        assert normalise_value(datetime(2016, 3, 22)) == "2016-03-22T00:00:00.000Z"

    def test_milliseconds(self):
        """Test that microseconds are truncated to milliseconds."""
        assert normalise_value(datetime(2016, 3, 22, 10, 15, 30, 123456)) == "2016-03-22T10:15:30.123Z"

    def test_aware_datetime_converted_to_utc(self):
        """Test that aware datetimes are shifted to UTC."""
        value = datetime(2016, 3, 22, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        assert normalise_value(value) == "2016-03-22T10:00:00.000Z"

    def test_date(self):
        """Test that dates render as UTC midnight."""
        assert normalise_value(date(2016, 3, 22)) == "2016-03-22T00:00:00.000Z"


class TestFormatLiteral:
    """Test rendering of values as text."""

    def test_booleans_lowercase(self):
        """Test that booleans use the lowercase keywords."""
        assert format_literal(True) == "true"
        assert format_literal(False) == "false"

    def test_none_is_null(self):
        """Test that None renders as null."""
        assert format_literal(None) == "null"

    def test_numbers(self):
        """Test that numbers render with str()."""
        assert format_literal(19) == "19"
        assert format_literal(1.5) == "1.5"


# =============================================================================
# Fields
# =============================================================================


class TestFieldToStr:
    """Test field input resolution."""

    def test_text(self):
        """Test that text fields are used verbatim."""
        assert field_to_str("SubType/Id") == "SubType/Id"

    def test_callback_receives_function_table(self):
        """Test that field callbacks are called with the function table."""
        assert field_to_str(lambda x: x.to_lower("Name")) == "tolower(Name)"

    def test_non_text_rejected(self):
        """Test that a number is not a field."""
        with pytest.raises(InvalidInputKind):
            field_to_str(42)

    def test_callback_returning_non_text_rejected(self):
        """Test that a field callback must return text."""
        with pytest.raises(InvalidInputKind) as exc_info:
            field_to_str(lambda x: 42)

        assert exc_info.value.details == {"kind": "int"}

    def test_invalid_input_kind_is_type_error(self):
        """Test that field kind errors are TypeErrors."""
        with pytest.raises(TypeError):
            field_to_str(None)


# =============================================================================
# Canonical function table
# =============================================================================


class TestCanonicalFunctions:
    """Test the canonical function table."""

    def test_length(self):
        """Test length()."""
        assert functions.length("CompanyName") == "length(CompanyName)"

    def test_to_lower(self):
        """Test tolower()."""
        assert functions.to_lower("CompanyName") == "tolower(CompanyName)"

    def test_to_upper(self):
        """Test toupper()."""
        assert functions.to_upper("CompanyName") == "toupper(CompanyName)"

    def test_trim(self):
        """Test trim()."""
        assert functions.trim("CompanyName") == "trim(CompanyName)"

    def test_index_of(self):
        """Test that indexof() quotes its search text."""
        assert functions.index_of("CompanyName", "lfreds") == "indexof(CompanyName, 'lfreds')"

    def test_substring_start(self):
        """Test substring() with a start position."""
        assert functions.substring("CompanyName", 1) == "substring(CompanyName, 1)"

    def test_substring_start_and_length(self):
        """Test substring() with a start position and a length."""
        assert functions.substring("CompanyName", 1, 2) == "substring(CompanyName, 1, 2)"

    def test_substring_arity(self):
        """Test that substring() takes one or two numbers."""
        with pytest.raises(TypeError):
            functions.substring("CompanyName")
        with pytest.raises(TypeError):
            functions.substring("CompanyName", 1, 2, 3)

    def test_concat(self):
        """Test that concat() quotes its text by default."""
        assert functions.concat("City", ", ") == "concat(City, ', ')"

    def test_nested_concat_without_normalisation(self):
        """Test concat() over a computed field with a verbatim value."""
        result = functions.concat(lambda y: y.concat("City", ", "), "Country", False)

        assert result == "concat(concat(City, ', '), Country)"

    def test_nested_field_callbacks(self):
        """Test functions composed through field callbacks."""
        assert functions.to_upper(lambda x: x.trim("Name")) == "toupper(trim(Name))"

    def test_table_is_read_only(self):
        """Test that the shared table cannot be modified."""
        with pytest.raises(AttributeError):
            functions.length = lambda field: field
        with pytest.raises(AttributeError):
            functions.custom = lambda field: field


class TestCanonicalFunction:
    """Test the generic function formatter."""

    def test_without_values(self):
        """Test a function of the field alone."""
        assert canonical_function("year", "BirthDate") == "year(BirthDate)"

    def test_empty_values(self):
        """Test that an empty value list is the same as none."""
        assert canonical_function("year", "BirthDate", []) == "year(BirthDate)"

    def test_scalar_value(self):
        """Test that a scalar is a single value."""
        assert canonical_function("contains", "Name", "a") == "contains(Name, 'a')"

    def test_several_values(self):
        """Test several values after the field."""
        assert canonical_function("substring", "Name", [1, 2]) == "substring(Name, 1, 2)"

    def test_without_normalisation(self):
        """Test that values pass verbatim without normalisation."""
        assert canonical_function("contains", "Name", "Other", normalise=False) == "contains(Name, Other)"

    def test_reverse(self):
        """Test that reverse puts the values before the field."""
        assert canonical_function("substringof", "Name", "a", reverse=True) == "substringof('a', Name)"


# =============================================================================
# Comparisons
# =============================================================================


class TestComparisons:
    """Test comparison and membership text."""

    def test_compare_text(self):
        """Test a comparison with a text value."""
        assert compare("Name", "eq", "a") == "Name eq 'a'"

    def test_compare_number(self):
        """Test a comparison with a number."""
        assert compare("Id", "gt", 1) == "Id gt 1"

    def test_compare_verbatim(self):
        """Test a comparison without normalisation."""
        assert compare("Name", "eq", "OtherName", False) == "Name eq OtherName"

    def test_compare_boolean(self):
        """Test a comparison with a boolean."""
        assert compare("IsActive", "eq", True) == "IsActive eq true"

    def test_compare_map_set(self):
        """Test that a set gives one comparison per value."""
        assert sorted(compare_map("Id", "eq", {1, 2})) == ["Id eq 1", "Id eq 2"]

    def test_compare_map_generator(self):
        """Test that a generator gives one comparison per value."""
        assert compare_map("Id", "ne", (v for v in ["a", "b"])) == ["Id ne 'a'", "Id ne 'b'"]

    def test_in_several_values_grouped(self):
        """Test that a multi-value expansion is a grouped rule."""
        assert compare_in("f", [1, 2]) == Leaf("f eq 1 or f eq 2", grouped=True)

    def test_in_single_value_not_grouped(self):
        """Test that a single value is a plain rule."""
        assert compare_in("f", 1) == Leaf("f eq 1")

    def test_in_empty(self):
        """Test that no values give an empty rule."""
        assert not compare_in("f", [])
        assert not compare_in("f", None)

    def test_not_in(self):
        """Test that not-in negates the 'or' expansion."""
        assert compare_not_in("f", [1, 2]) == Leaf("not (f eq 1 or f eq 2)")

    def test_not_in_empty(self):
        """Test that not-in over no values gives no rule."""
        assert compare_not_in("f", []) is None

    def test_negate(self):
        """Test negation of a rule."""
        assert negate("Type eq 'X'") == Leaf("not (Type eq 'X')")

    def test_negate_empty(self):
        """Test that negating nothing gives no rule."""
        assert negate("") is None
        assert negate(None) is None
