"""
Test data factories.

Uses factory pattern to generate consistent load plan text.
"""

from typing import Optional


# ===================
# SAMPLE LINES
# ===================

# SHC, secondary code and inbound block all present
LINE_FULL = "001 176-12345678 DXBMXP 2 10.0 1.0 1.0 COL DESCRIPTION ABC P1 NORM SS N EK0201 12OCT2025 10:30 N"
LINE_FULL_2 = "002 176-87654321 DXBMXP 1 5.0 0.5 0.5 COL DESCRIPTION ABC P1 NORM SS N EK0202 11OCT2025 09:15 N"
# SHC column blank
LINE_SHORT_SHC = "002 176-87654321 DXBMXP 1 5.0 0.5 0.5 GOLD JEWELLERY VAL P2 NORM SS N EK0202 11OCT2025 09:15 N"
# Two-character SHC
LINE_TWO_CHAR_SHC = "005 176-12121212 DXBMXP 1 5.0 0.5 0.5 EL LITHIUM BATTERIES GCR P2 NORM SS N EK0202 11OCT2025 09:15 N"
# No secondary product code
LINE_NO_PC = "003 176-11112222 DXBMXP 3 30.0 0.3 0.3 PER FRESH FLOWERS PXS QRT SS N EK0203 10OCT2025 22:05 N"
# Secondary code glued to the handling charge
LINE_GLUED = "011 176-33334444 DXBLHR 1 2.0 0.1 0.1 VAL BANK NOTES VAL P2QRT SS Y EK0204 10OCT2025 08:00 N"
LINE_GLUED_NORM = "012 176-12345679 DXBMXP 2 10.0 1.0 1.0 COL MEDICINES GCR P2NORM SS N EK0201 12OCT2025 10:30 N"
# No inbound flight / arrival block
LINE_NO_INBOUND = "002 176-98208961 DXBMAA 1 10.0 0.1 0.1 VAL GOLD JEWELLERY. VAL P2 NORM NN N N"
# No inbound block, QNN and warehouse present
LINE_NO_INBOUND_QNN = "006 176-24242424 DXBMXP 4 40.0 0.4 0.4 GEN MACHINERY PARTS GCR P1 NORM SS N Q12 W3 Y"
# Glued secondary code on a row without the inbound block
LINE_NO_INBOUND_GLUED = "008 176-98208962 DXBMAA 1 10.0 0.1 0.1 VAL GOLD JEWELLERY. VAL P2NORM NN N N"
# Booking status and priority not printed
LINE_NO_BOOKING_STATUS = "009 176-98208963 DXBMAA 1 10.0 0.1 0.1 VAL GOLD JEWELLERY. VAL P2 NORM N"
# Lowercase description and product code
LINE_LOWERCASE = "007 176-13131313 DXBMXP 2 10.0 1.0 1.0 COL description abc P1 NORM SS N EK0201 12OCT2025 10:30 N"
# Truncated row: shipment-shaped but unparseable
LINE_TRUNCATED = "004 176-99990000 DXBMXP"

TABLE_HEADER = "SER. AWB NO ORGDES PCS WGT VOL LVOL SHC MAN.DESC PCODE PC THC BS PI FLTIN ARRDT.TIME QNN/AQNN WHS SI"
SEPARATOR = "-" * 80


SAMPLE_LOAD_PLAN = "\n".join([
    "EMIRATES SKYCARGO LOAD PLAN",
    "EK0205 / 12 OCT",
    "ACFT TYPE: 388Y ACFT REG: A6-EOM STD: 09:30",
    "PREPARED BY: S123456 PREPARED ON: 12-Oct-25 08:15:00",
    "TTL PLN ULD: 06PMC/07AKE ULD VERSION: 06PMC/26",
    "SECTOR: DXBMXP",
    TABLE_HEADER,
    SEPARATOR,
    "**** DO NOT LOAD BELOW PMC ****",
    LINE_FULL,
    "[Must be load in Fire containment equipment]",
    LINE_FULL_2,
    "XX 02PMC XX",
    "***** RAMP TRANSFER *****",
    "XX 01AKE XX",
    LINE_NO_PC,
    "RELOCATED FROM EK0201",
    "TOTALS: 6 45.0 1.8 1.8",
])


class ShipmentLineFactory:
    """
    Factory for manifest rows.

    Usage:
        # Create with defaults
        line = ShipmentLineFactory.create()

        # Create with overrides
        line = ShipmentLineFactory.create(shc="VAL", man_desc="GOLD BARS")

        # Create multiple
        lines = ShipmentLineFactory.create_batch(5)
    """

    _counter = 0

    @classmethod
    def _next_counter(cls) -> int:
        cls._counter += 1
        return cls._counter

    @classmethod
    def create(
        cls,
        serial_no: Optional[str] = None,
        awb_no: Optional[str] = None,
        origin: str = "DXB",
        destination: str = "MXP",
        pieces: int = 1,
        weight: float = 10.0,
        shc: str = "COL",
        man_desc: str = "GENERAL CARGO",
        pcode: str = "GCR",
        pc: str = "P1",
        thc: str = "NORM",
        flt_in: str = "EK0201",
        arr_dt_time: str = "12OCT2025 10:30",
        si: str = "N",
    ) -> str:
        """
        Create a single manifest row.

        Args:
            serial_no: Three-digit serial (auto-generated if not provided)
            awb_no: AWB as printed (auto-generated if not provided)
            flt_in: Inbound flight; empty omits the inbound block

        Returns:
            Row text as it appears in an extracted load plan
        """
        n = cls._next_counter()
        columns = [
            serial_no or f"{n % 1000:03d}",
            awb_no or f"176-{10000000 + n:08d}",
            f"{origin}{destination}",
            str(pieces),
            f"{weight:.1f}",
            "0.1",
            "0.1",
            shc,
            man_desc,
            pcode,
            pc,
            thc,
            "SS",
            "N",
        ]
        if flt_in:
            columns += [flt_in, arr_dt_time]
        columns.append(si)
        return " ".join(c for c in columns if c)

    @classmethod
    def create_batch(cls, count: int, **kwargs) -> list[str]:
        """Create multiple rows with the same overrides."""
        return [cls.create(**kwargs) for _ in range(count)]


class LoadPlanFactory:
    """
    Factory for whole load plan documents.

    Usage:
        text = LoadPlanFactory.create(sections=[
            ("DXBMXP", [line_1, line_2, "XX 02PMC XX"]),
        ])
    """

    @classmethod
    def create(
        cls,
        sections: list[tuple[str, list[str]]],
        flight: str = "EK0205",
        flight_date: str = "12 OCT",
        header_lines: Optional[list[str]] = None,
    ) -> str:
        """
        Create a load plan text.

        Args:
            sections: (sector, body lines) pairs; each gets a SECTOR marker,
                table header and TOTALS line
            flight: Flight printed in the header; empty prints none
            flight_date: Date printed after the flight

        Returns:
            Document text
        """
        lines = [f"{flight} / {flight_date}".strip(" /")]
        lines += header_lines or []
        for sector, body in sections:
            lines += [f"SECTOR: {sector}", TABLE_HEADER, SEPARATOR]
            lines += body
            lines.append("TOTALS: 0 0.0 0.0 0.0")
        return "\n".join(lines)
