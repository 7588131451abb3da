"""
Tests for the address converter and rectangle geometry.
"""

import pytest

from autoestimate.domain.address import (
    column_letter,
    column_number,
    parse_address,
    quote_sheet_title,
    to_address,
    to_range_ref,
    to_rectangle,
)
from autoestimate.domain.errors import MalformedRectangle
from autoestimate.domain.geometry import Rectangle


class TestColumnLetters:
    @pytest.mark.parametrize(
        "number, letters",
        [(1, "A"), (26, "Z"), (27, "AA"), (52, "AZ"), (702, "ZZ"), (703, "AAA")],
    )
    def test_letters(self, number, letters):
        assert column_letter(number) == letters
        assert column_number(letters) == number

    def test_lowercase_letters_decode(self):
        assert column_number("ab") == 28

    def test_zero_is_rejected(self):
        with pytest.raises(ValueError):
            column_letter(0)


class TestToAddress:
    def test_single_cell(self):
        rect = Rectangle(start_row=0, end_row=1, start_col=0, end_col=1)
        assert to_address(rect, "Sheet1") == "Sheet1!A1:A1"

    def test_members_table(self):
        rect = Rectangle(start_row=4, end_row=10, start_col=1, end_col=4)
        assert to_address(rect, "メンバー") == "メンバー!B5:D10"

    def test_wide_table_crosses_z(self):
        rect = Rectangle(start_row=0, end_row=2, start_col=25, end_col=27)
        assert to_range_ref(rect) == "Z1:AA2"

    def test_title_with_space_is_quoted(self):
        rect = Rectangle(0, 2, 0, 2)
        assert to_address(rect, "My Sheet") == "'My Sheet'!A1:B2"

    def test_title_with_quote_is_escaped(self):
        assert quote_sheet_title("Bob's") == "'Bob''s'"

    @pytest.mark.parametrize("title", ["2025", "A1", "ab12", "R1C1", "rc", "1st", "x-y"])
    def test_ambiguous_titles_are_quoted(self, title):
        assert quote_sheet_title(title) == f"'{title}'"

    @pytest.mark.parametrize("title", ["Sheet1", "メンバー", "Form_Responses", "ABCD1", "R1D"])
    def test_plain_titles_stay_bare(self, title):
        assert quote_sheet_title(title) == title


class TestToRectangle:
    @pytest.mark.parametrize(
        "rect",
        [
            Rectangle(0, 1, 0, 1),
            Rectangle(3, 8, 0, 4),
            Rectangle(3, 8, 2, 30),
            Rectangle(0, 2, 25, 26),
            Rectangle(0, 2, 25, 27),
            Rectangle(9, 1000, 701, 703),
            Rectangle(0, 1, 18277, 18278),
        ],
    )
    @pytest.mark.parametrize("title", ["Sheet1", "Data Sheet", "Bob's", "2025", "R1C1", "メンバー"])
    def test_round_trip(self, rect, title):
        address = to_address(rect, title)
        assert parse_address(address) == (title, rect)

    def test_zzz_is_the_last_column(self):
        assert to_range_ref(Rectangle(0, 1, 18277, 18278)) == "ZZZ1:ZZZ1"

    def test_parse_keeps_title(self):
        title, rect = parse_address("'Bob''s'!C2:D4")
        assert title == "Bob's"
        assert rect == Rectangle(1, 4, 2, 4)

    def test_single_cell_without_title(self):
        title, rect = parse_address("B3")
        assert title is None
        assert rect == Rectangle(2, 3, 1, 2)

    def test_reversed_corners_are_normalized(self):
        assert to_rectangle("D4:B2") == Rectangle(1, 4, 1, 4)

    @pytest.mark.parametrize("address", ["", "Sheet1!", "Sheet1!A0:B2", "1A:2B"])
    def test_garbage_is_rejected(self, address):
        with pytest.raises(ValueError):
            parse_address(address)


class TestRectangle:
    def test_counts(self):
        rect = Rectangle(2, 7, 1, 4)
        assert rect.row_count == 5
        assert rect.col_count == 3

    @pytest.mark.parametrize(
        "bounds",
        [(0, 0, 0, 1), (3, 2, 0, 1), (0, 1, 2, 2), (-1, 1, 0, 1), (0, 1.5, 0, 1), (True, 2, 0, 1)],
    )
    def test_invalid_bounds(self, bounds):
        with pytest.raises(MalformedRectangle):
            Rectangle(*bounds)

    def test_from_grid_range_missing_start_means_zero(self):
        rect = Rectangle.from_grid_range({"endRowIndex": 4, "endColumnIndex": 2}, "t1")
        assert rect == Rectangle(0, 4, 0, 2)

    def test_from_grid_range_missing_end_is_malformed(self):
        with pytest.raises(MalformedRectangle) as exc:
            Rectangle.from_grid_range({"startRowIndex": 0, "endColumnIndex": 2}, "t1")
        assert exc.value.table_id == "t1"

    def test_from_grid_range_none(self):
        with pytest.raises(MalformedRectangle):
            Rectangle.from_grid_range(None, "t1")

    def test_grid_range_round_trip(self):
        rect = Rectangle(1, 5, 2, 6)
        grid = rect.to_grid_range(sheet_id=42)
        assert grid["sheetId"] == 42
        assert Rectangle.from_grid_range(grid) == rect
