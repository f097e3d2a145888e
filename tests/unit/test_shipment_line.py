"""
Unit tests for the shipment line matcher.

Each manifest layout variant must land on the right strategy and columns.
"""

import pytest

from parsers.shipment_line import (
    ShipmentFields,
    match_shipment_line,
    looks_like_shipment_line,
    _match_with_strategy,
    _split_glued_code,
    _split_trailing_block,
    _is_plausible,
)
from tests.factories import (
    LINE_FULL,
    LINE_SHORT_SHC,
    LINE_TWO_CHAR_SHC,
    LINE_NO_PC,
    LINE_GLUED,
    LINE_GLUED_NORM,
    LINE_NO_INBOUND,
    LINE_NO_INBOUND_QNN,
    LINE_NO_INBOUND_GLUED,
    LINE_NO_BOOKING_STATUS,
    LINE_LOWERCASE,
    LINE_TRUNCATED,
    ShipmentLineFactory,
)


# ===================
# SHAPE DETECTION
# ===================

class TestLooksLikeShipmentLine:
    """Tests for the serial + AWB shape check."""

    def test_full_row(self):
        """A complete row has the shipment shape."""
        assert looks_like_shipment_line(LINE_FULL)

    def test_truncated_row(self):
        """Shape only needs serial and AWB."""
        assert looks_like_shipment_line(LINE_TRUNCATED)

    def test_spaced_awb(self):
        """AWB may carry spaces around the dash."""
        assert looks_like_shipment_line("001 176 - 12345678 DXBMXP")

    def test_not_a_row(self):
        """Markers and comments are not shipment rows."""
        assert not looks_like_shipment_line("XX 02PMC XX")
        assert not looks_like_shipment_line("TOTALS: 3 45.0")
        assert not looks_like_shipment_line("01 176-12345678 DXBMXP")


# ===================
# STRATEGY CASCADE
# ===================

class TestStrategySelection:
    """Tests that each layout is handled by the intended strategy."""

    def test_full_layout(self):
        """All columns present."""
        name, fields = _match_with_strategy(LINE_FULL)
        assert name == "full"
        assert fields.serial_no == "001"
        assert fields.awb_no == "176-12345678"
        assert fields.origin == "DXB"
        assert fields.destination == "MXP"
        assert fields.pieces == 2
        assert fields.weight == 10.0
        assert fields.volume == 1.0
        assert fields.lvol == 1.0
        assert fields.shc == "COL"
        assert fields.man_desc == "DESCRIPTION"
        assert fields.pcode == "ABC"
        assert fields.pc == "P1"
        assert fields.thc == "NORM"
        assert fields.bs == "SS"
        assert fields.pi == "N"
        assert fields.flt_in == "EK0201"
        assert fields.arr_dt_time == "12OCT2025 10:30"
        assert fields.si == "N"

    def test_blank_shc(self):
        """Description starts right after LVOL when SHC is blank."""
        name, fields = _match_with_strategy(LINE_SHORT_SHC)
        assert name == "short_shc"
        assert fields.shc == ""
        assert fields.man_desc == "GOLD JEWELLERY"
        assert fields.pcode == "VAL"
        assert fields.pc == "P2"

    def test_two_character_shc(self):
        """One- and two-character SHC values are kept."""
        name, fields = _match_with_strategy(LINE_TWO_CHAR_SHC)
        assert name == "short_shc"
        assert fields.shc == "EL"
        assert fields.man_desc == "LITHIUM BATTERIES"
        assert fields.pcode == "GCR"

    def test_missing_secondary_code(self):
        """Handling charge follows the product code directly."""
        name, fields = _match_with_strategy(LINE_NO_PC)
        assert name == "no_secondary_code"
        assert fields.shc == "PER"
        assert fields.man_desc == "FRESH FLOWERS"
        assert fields.pcode == "PXS"
        assert fields.pc == ""
        assert fields.thc == "QRT"
        assert fields.flt_in == "EK0203"

    def test_missing_inbound_block(self):
        """Row ends after the priority indicator and SI."""
        name, fields = _match_with_strategy(LINE_NO_INBOUND)
        assert name == "no_inbound"
        assert fields.shc == "VAL"
        assert fields.man_desc == "GOLD JEWELLERY."
        assert fields.pcode == "VAL"
        assert fields.pc == "P2"
        assert fields.thc == "NORM"
        assert fields.bs == "NN"
        assert fields.flt_in == ""
        assert fields.arr_dt_time == ""
        assert fields.si == "N"

    def test_missing_inbound_with_qnn_and_warehouse(self):
        """Trailing columns still split when the inbound block is absent."""
        fields = match_shipment_line(LINE_NO_INBOUND_QNN)
        assert fields.flt_in == ""
        assert fields.qnn_aqnn == "Q12"
        assert fields.whs == "W3"
        assert fields.si == "Y"

    def test_missing_booking_status_and_priority(self):
        """Rows without BS/PI still match; both columns take their defaults."""
        name, fields = _match_with_strategy(LINE_NO_BOOKING_STATUS)
        assert name == "no_booking_status"
        assert fields.shc == "VAL"
        assert fields.man_desc == "GOLD JEWELLERY."
        assert fields.pcode == "VAL"
        assert fields.pc == "P2"
        assert fields.thc == "NORM"
        assert fields.bs == "SS"
        assert fields.pi == "N"
        assert fields.flt_in == ""
        assert fields.si == "N"

    def test_printed_booking_status_is_kept(self):
        """Defaults never override a printed BS/PI pair."""
        fields = match_shipment_line(LINE_NO_INBOUND)
        assert (fields.bs, fields.pi) == ("NN", "N")

    def test_irregular_whitespace(self):
        """Tabs and runs of spaces are normalized before matching."""
        line = LINE_FULL.replace(" ", "  ").replace("DXBMXP", "\tDXBMXP\t")
        fields = match_shipment_line(line)
        assert fields is not None
        assert fields.awb_no == "176-12345678"
        assert fields.man_desc == "DESCRIPTION"

    def test_factory_row(self):
        """Multi-word descriptions stop at the product code."""
        line = ShipmentLineFactory.create(man_desc="SPARE ENGINE PARTS", pcode="GCR")
        fields = match_shipment_line(line)
        assert fields.man_desc == "SPARE ENGINE PARTS"
        assert fields.pcode == "GCR"


class TestRejection:
    """Tests that ambiguous rows are not mis-split."""

    def test_lowercase_description_rejected(self):
        """No strategy accepts a lowercase description or product code."""
        assert match_shipment_line(LINE_LOWERCASE) is None

    def test_truncated_row_rejected(self):
        """Shape alone is not enough."""
        assert match_shipment_line(LINE_TRUNCATED) is None

    def test_non_shipment_line(self):
        """Lines without the shape never reach the strategies."""
        assert match_shipment_line("RELOCATED FROM EK0201") is None
        assert match_shipment_line("") is None

    def test_plausibility_rules(self):
        """Description must start uppercase; product code is three letters."""
        base = dict(serial_no="001", awb_no="176-12345678", origin="DXB", destination="MXP")
        assert _is_plausible(ShipmentFields(**base, shc="COL", man_desc="MEDICINES", pcode="GCR"))
        assert not _is_plausible(ShipmentFields(**base, shc="COL", man_desc="medicines", pcode="GCR"))
        assert not _is_plausible(ShipmentFields(**base, shc="COL", man_desc="2 BOXES", pcode="GCR"))
        assert not _is_plausible(ShipmentFields(**base, shc="COL", man_desc="MEDICINES", pcode="GC"))

    def test_blank_shc_cannot_hide_shc_column(self):
        """With SHC blank, the description may not open with an SHC code list."""
        base = dict(serial_no="001", awb_no="176-12345678", origin="DXB", destination="MXP")
        assert not _is_plausible(ShipmentFields(**base, man_desc="VUN-CRT MEDICINES", pcode="GCR"))
        assert _is_plausible(ShipmentFields(**base, man_desc="GOLD BARS", pcode="VAL"))


# ===================
# SECONDARY SPLITS
# ===================

class TestGluedCodeSplit:
    """Tests for secondary code recovery."""

    def test_glued(self):
        assert _split_glued_code("P2QRT") == ("P2", "QRT")

    def test_spaced(self):
        assert _split_glued_code("P2 QRT") == ("P2", "QRT")

    def test_plain_charge_code(self):
        assert _split_glued_code("NORM") == ("", "NORM")

    def test_glued_row(self):
        """Full row with the secondary code glued to the charge code."""
        fields = match_shipment_line(LINE_GLUED)
        assert fields.pcode == "VAL"
        assert fields.pc == "P2"
        assert fields.thc == "QRT"
        assert fields.pi == "Y"

    def test_glued_four_letter_charge_code(self):
        """Four-letter charge codes split like three-letter ones."""
        name, fields = _match_with_strategy(LINE_GLUED_NORM)
        assert name == "no_secondary_code"
        assert fields.man_desc == "MEDICINES"
        assert fields.pcode == "GCR"
        assert fields.pc == "P2"
        assert fields.thc == "NORM"
        assert fields.flt_in == "EK0201"

    def test_glued_without_inbound_block(self):
        name, fields = _match_with_strategy(LINE_NO_INBOUND_GLUED)
        assert name == "no_inbound"
        assert fields.pc == "P2"
        assert fields.thc == "NORM"
        assert fields.bs == "NN"
        assert fields.si == "N"

    def test_split_glued_norm(self):
        assert _split_glued_code("P2NORM") == ("P2", "NORM")


class TestTrailingBlock:
    """Tests for QNN/AQNN, warehouse and SI assignment."""

    def test_si_only(self):
        result = _split_trailing_block(["Y"], "EK0201", "12OCT2025 10:30")
        assert result["si"] == "Y"
        assert result["qnn_aqnn"] == ""
        assert result["whs"] == ""

    def test_si_defaults_to_n(self):
        result = _split_trailing_block([], "", "")
        assert result["si"] == "N"

    def test_qnn_and_warehouse(self):
        result = _split_trailing_block(["AQ1", "WH", "2", "N"], "EK0201", "12OCT2025")
        assert result["qnn_aqnn"] == "AQ1"
        assert result["whs"] == "WH 2"
        assert result["si"] == "N"

    def test_inbound_recovered_from_tail(self):
        """Flight + date at the start of the tail become the inbound block."""
        result = _split_trailing_block(["EK0201", "12OCT2025", "10:30", "N"], "", "")
        assert result["flt_in"] == "EK0201"
        assert result["arr_dt_time"] == "12OCT2025 10:30"
        assert result["qnn_aqnn"] == ""


# ===================
# NUMERIC FALLBACK
# ===================

class TestNumericColumns:
    """Tests for numeric parsing."""

    @pytest.mark.parametrize("weight,expected", [
        ("10.0", 10.0),
        ("1,234.5", 1234.5),
        ("10", 10.0),
    ])
    def test_weight_values(self, weight, expected):
        line = LINE_FULL.replace(" 10.0 ", f" {weight} ", 1)
        fields = match_shipment_line(line)
        assert fields.weight == expected

    def test_unparseable_number_falls_back_to_zero(self):
        """Malformed numbers are zero, never an error."""
        line = LINE_FULL.replace(" 1.0 1.0 ", " 1..0 1.0 ", 1)
        fields = match_shipment_line(line)
        assert fields is not None
        assert fields.volume == 0.0
