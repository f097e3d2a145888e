"""
Shared test fixtures.

Sample documents mirror the text an upstream DOCX/RTF extraction produces.
"""

import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest

from tests.factories import SAMPLE_LOAD_PLAN, LoadPlanFactory, ShipmentLineFactory


@pytest.fixture
def sample_load_plan() -> str:
    """Single-sector load plan with both ULD marker orders and a ramp transfer."""
    return SAMPLE_LOAD_PLAN


@pytest.fixture
def multi_sector_load_plan() -> str:
    """Two sectors, each closed by its own TOTALS line."""
    return LoadPlanFactory.create(sections=[
        ("DXBMXP", [
            ShipmentLineFactory.create(serial_no="001", awb_no="176-12345678"),
            "XX 01PMC XX",
        ]),
        ("MXPJFK", [
            ShipmentLineFactory.create(serial_no="001", awb_no="176-55556666", origin="MXP", destination="JFK"),
            ShipmentLineFactory.create(serial_no="002", awb_no="176-77778888", origin="MXP", destination="JFK"),
        ]),
    ])


@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/health")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
