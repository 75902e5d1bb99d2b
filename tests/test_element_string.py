"""
Tests for GS1 date encoding, element string formatting and the Data
Matrix request descriptor.
"""

import itertools
from datetime import datetime
from urllib.parse import parse_qs, urlsplit

import pytest
from rx_barcode import build_datamatrix_url, format_element_string, format_gs1_date


GTIN = "10301234567893"


class TestGs1Date:
    """Tests for YYMMDD encoding."""

    def test_basic(self):
        assert format_gs1_date("2025-03-07") == "250307"

    def test_empty_and_blank(self):
        assert format_gs1_date("") == ""
        assert format_gs1_date("   ") == ""

    @pytest.mark.parametrize("value", ["not-a-date", "2025-13-01", "2025-02-30", "31/12/2025"])
    def test_unparseable(self, value):
        assert format_gs1_date(value) == ""

    def test_year_padding(self):
        assert format_gs1_date("2005-01-02") == "050102"
        assert format_gs1_date("2100-12-31") == "001231"

    def test_time_part_does_not_shift_day(self):
        """Calendar fields are used as entered, no timezone conversion."""
        assert format_gs1_date("2025-03-07T23:30:00-08:00") == "250307"
        assert format_gs1_date("2025-03-07T24:00") == "250307"
        assert format_gs1_date("2025-12-31t24:00:00") == "251231"
        assert format_gs1_date("2025-03-07 23:59") == "250307"

    def test_output_is_valid_yymmdd(self):
        parsed = datetime.strptime(format_gs1_date("2028-04-30"), "%y%m%d")
        assert parsed.date().isoformat() == "2028-04-30"


class TestElementString:
    """Tests for AI concatenation."""

    def test_gtin_only(self):
        assert format_element_string(GTIN, "", "", "") == f"(01){GTIN}"

    def test_all_fields(self):
        assert format_element_string(GTIN, "250307", "LOT42", "SN001") == \
            f"(01){GTIN}(17)250307(10)LOT42(21)SN001"

    @pytest.mark.parametrize("present", list(itertools.product([False, True], repeat=3)))
    def test_presence_and_order(self, present):
        """Each optional AI appears iff its value is non-empty, in 17/10/21 order."""
        values = [v if p else "" for v, p in zip(["250307", "LOT42", "SN001"], present)]
        result = format_element_string(GTIN, *values)

        assert result.startswith(f"(01){GTIN}")
        for ai, value in zip(["(17)", "(10)", "(21)"], values):
            assert (ai in result) == bool(value)
            if value:
                assert f"{ai}{value}" in result

        positions = [result.index(ai) for ai in ["(17)", "(10)", "(21)"] if ai in result]
        assert positions == sorted(positions)

    def test_no_empty_ai_pairs(self):
        result = format_element_string(GTIN, "", "LOT", "")
        assert "(17)" not in result
        assert "(21)" not in result


class TestDataMatrixUrl:
    """Tests for the image service request descriptor."""

    def test_default_endpoint(self):
        url = build_datamatrix_url(f"(01){GTIN}(17)250307")
        assert url == f"https://bwipjs-api.metafloor.com/?bcid=gs1datamatrix&text=(01){GTIN}(17)250307"

    def test_custom_endpoint(self):
        url = build_datamatrix_url("(01)X", endpoint="http://localhost:3030/")
        assert url.startswith("http://localhost:3030/?bcid=gs1datamatrix&text=")

    def test_special_characters_stay_in_text_param(self):
        element = f"(01){GTIN}(10)A&B #1"
        query = parse_qs(urlsplit(build_datamatrix_url(element)).query)
        assert query["bcid"] == ["gs1datamatrix"]
        assert query["text"] == [element]
