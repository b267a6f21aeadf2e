"""
Tests for the HTTP API.

Tests cover:
- Health endpoints
- PDF downloads with attachment headers
- 404 for unknown report types, 422 for unparseable records
- 500 error body when generation fails
- Zip bundles, including partial bundles
"""

import io
import zipfile
import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from reporting.composer import PDF_MAGIC
from reporting.supplement_report import SupplementReportComposer
from utils.config import Config
from web.app import create_app

SUPPLEMENT = {
    "company": {"name": "Acme Roofing LLC", "phone": "(555) 123-4567"},
    "claim": {
        "claimName": "Smith Residence",
        "claimNumber": "CLM-2024-0042",
        "carrierName": "State Farm",
        "propertyAddress": "456 Oak Ave, Anytown, USA",
    },
    "adjusterTotal": 8500,
    "measurements": {"measuredSquares": 25.5, "wastePercent": 12, "suggestedSquares": 28.6},
    "items": [
        {
            "code": "RFG FELT",
            "description": "Roofing felt - 15 lb.",
            "category": "Roofing",
            "quantity": 25.5,
            "unit": "SQ",
            "unitPrice": 22.0,
            "totalPrice": 561.0,
            "justification": "1. Required by code 2. Manufacturer warranty requires underlayment",
        },
    ],
    "generatedDate": "June 20, 2024",
}


@pytest.fixture
def config(tmp_path):
    return Config(brand_name="4MARGIN", attachment_root=str(tmp_path), reports_dir=str(tmp_path / "reports"))


@pytest.fixture
def client(config):
    return TestClient(create_app(config))


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json() == {"status": "ok"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_api_health_lists_report_types(self, client):
        data = client.get("/api/health").json()

        assert data["status"] == "healthy"
        assert data["report_types"] == ["supplement", "justification", "weather", "decoder"]


# =============================================================================
# Reports
# =============================================================================


class TestReportEndpoint:
    def test_supplement_pdf(self, client):
        response = client.post("/api/reports/supplement", json={"record": SUPPLEMENT})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="Smith_Residence_Supplement.pdf"'
        assert response.content.startswith(PDF_MAGIC)

    def test_requested_filename(self, client):
        response = client.post(
            "/api/reports/justification",
            json={"record": {"claimNumber": "CLM-1"}, "filename": "Smith support points.pdf"},
        )

        assert response.status_code == 200
        assert response.headers["content-disposition"] == 'attachment; filename="Smith_support_points.pdf"'

    @pytest.mark.parametrize("report_type", ["weather", "decoder", "Decoder"])
    def test_other_types(self, client, report_type):
        response = client.post(f"/api/reports/{report_type}", json={"record": {}})

        assert response.status_code == 200
        assert response.content.startswith(PDF_MAGIC)

    def test_unknown_type_is_404(self, client):
        response = client.post("/api/reports/invoice", json={"record": {}})

        assert response.status_code == 404

    def test_missing_record_is_422(self, client):
        response = client.post("/api/reports/supplement", json={})

        assert response.status_code == 422

    def test_generation_failure_is_500(self, client, monkeypatch):
        def broken(self, record, surface, cursor):
            raise RuntimeError("out of memory")

        monkeypatch.setattr(SupplementReportComposer, "render", broken)
        response = client.post("/api/reports/supplement", json={"record": SUPPLEMENT})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Failed to generate PDF",
            "detail": "out of memory",
        }


# =============================================================================
# Bundles
# =============================================================================


class TestBundleEndpoint:
    def test_bundle_zip(self, client):
        response = client.post(
            "/api/bundles",
            json={"supplement": SUPPLEMENT, "weather": {"claimNumber": "CLM-2024-0042"}},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert response.headers["content-disposition"] == 'attachment; filename="Smith_Residence_Supplement.zip"'
        assert "x-bundle-skipped" not in response.headers

        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            names = archive.namelist()
        assert names[0] == "Smith_Residence_Supplement.pdf"
        assert "CLM-2024-0042_Weather_Report.pdf" in names

    def test_partial_bundle_header(self, client):
        response = client.post(
            "/api/bundles",
            json={"supplement": SUPPLEMENT, "adjuster_estimate": "estimates/missing.pdf"},
        )

        assert response.status_code == 200
        assert response.headers["x-bundle-skipped"] == "Adjuster_Estimate.pdf"

    def test_empty_bundle_is_500(self, client, monkeypatch):
        import bundle.assembler as assembler

        def broken(name, fn, record):
            return assembler.DocumentFailure(name=name, reason="disabled")

        monkeypatch.setattr(assembler, "generate_document", broken)
        response = client.post("/api/bundles", json={"supplement": SUPPLEMENT})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to generate bundle"
        assert "Supplement_Summary.txt" in body["skipped"]
