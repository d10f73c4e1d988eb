"""Integration tests for API endpoints"""

from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from compliance_gateway.domain.exceptions import AccountingAPIError


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "bas_sync_total" in response.text
    assert "risk_scores_total" in response.text


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_connect_endpoints_return_authorization_urls(client: TestClient):
    xero = client.get("/v1/xero/connect").json()
    myob = client.get("/v1/myob/connect").json()

    assert xero["url"].startswith("https://login.xero.com/identity/connect/authorize?")
    assert f"state={xero['state']}" in xero["url"]
    assert myob["url"].startswith("https://secure.myob.com/oauth2/account/authorize?")
    assert xero["state"] != myob["state"]


@patch("compliance_gateway.infrastructure.clients.xero.XeroClient.get_bas_report", new_callable=AsyncMock)
def test_xero_sync_returns_normalized_summary(mock_report: AsyncMock, client: TestClient, auth_headers, xero_report):
    """Test POST /v1/xero/sync/bas/{tenant_id}"""
    mock_report.return_value = xero_report

    response = client.post(
        "/v1/xero/sync/bas/tenant-1",
        json={"period": "Q3 FY2024–25"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "xero"
    assert data["source_id"] == "tenant-1"
    assert data["period"] == "Q3 FY2024–25"
    assert float(data["rows"]["G1_totalSales"]) == 148500
    assert float(data["summary"]["net_payable"]) == 9510
    assert data["summary"]["refund"] is False
    assert data["rows"]["refund"] is False
    assert data["note"] is None
    assert data["last_synced"]
    mock_report.assert_awaited_once_with("tenant-1")


@patch("compliance_gateway.infrastructure.clients.myob.MYOBClient.get_bas_inputs", new_callable=AsyncMock)
def test_myob_sync_derives_period_from_dates(mock_inputs: AsyncMock, client: TestClient, auth_headers, myob_inputs):
    """Test POST /v1/myob/sync/bas/{company_file_id}"""
    mock_inputs.return_value = myob_inputs

    response = client.post(
        "/v1/myob/sync/bas/cf-1",
        json={"from_date": "2025-01-01", "to_date": "2025-03-31"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "myob"
    assert data["period"] == "Q3 FY2024–25"
    assert float(data["rows"]["totalSales"]) == 96200
    assert float(data["summary"]["net_payable"]) == 5891
    assert data["summary"]["capital_purchases"] is None
    assert data["note"].startswith("Computed from MYOB transaction data")


@patch("compliance_gateway.infrastructure.clients.xero.XeroClient.get_bas_report", new_callable=AsyncMock)
def test_sync_without_body_uses_default_period(mock_report: AsyncMock, client: TestClient, auth_headers, xero_report):
    mock_report.return_value = xero_report

    response = client.post("/v1/xero/sync/bas/tenant-1", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["period"] == "Current Quarter"


@patch("compliance_gateway.infrastructure.clients.xero.XeroClient.get_bas_report", new_callable=AsyncMock)
def test_xero_sync_labels_period_from_report_not_request_dates(
    mock_report: AsyncMock, client: TestClient, auth_headers, xero_report
):
    """Xero decides the reported period, so request dates must not relabel the figures"""
    mock_report.return_value = {
        **xero_report,
        "ReportTitles": ["Activity Statement", "Demo Company (AU)", "1 January 2025 to 31 March 2025"],
    }

    response = client.post(
        "/v1/xero/sync/bas/tenant-1",
        json={"from_date": "2024-07-01", "to_date": "2024-09-30"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["period"] == "1 January 2025 to 31 March 2025"
    mock_report.assert_awaited_once_with("tenant-1")


def test_sync_requires_bearer_token(client: TestClient):
    response = client.post("/v1/xero/sync/bas/tenant-1")
    assert response.status_code == 401


@patch("compliance_gateway.infrastructure.clients.xero.XeroClient.get_bas_report", new_callable=AsyncMock)
def test_sync_malformed_report_is_unreadable_not_zero(mock_report: AsyncMock, client: TestClient, auth_headers):
    """A malformed report must not be reported as a zero-activity period"""
    mock_report.return_value = None

    response = client.post("/v1/xero/sync/bas/tenant-1", headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["detail"] == "Unable to read data for this period"

    history = client.get("/v1/bas/history?source_id=tenant-1").json()
    assert history["snapshots"] == []


@patch("compliance_gateway.infrastructure.clients.myob.MYOBClient.get_bas_inputs", new_callable=AsyncMock)
def test_sync_vendor_outage_returns_503(mock_inputs: AsyncMock, client: TestClient, auth_headers):
    mock_inputs.side_effect = AccountingAPIError("myob", "MYOB API error: 502")

    response = client.post("/v1/myob/sync/bas/cf-1", headers=auth_headers)

    assert response.status_code == 503
    assert response.json()["detail"] == "MYOB service unavailable"


def test_sync_rejects_inverted_date_range(client: TestClient, auth_headers):
    response = client.post(
        "/v1/myob/sync/bas/cf-1",
        json={"from_date": "2025-03-31", "to_date": "2025-01-01"},
        headers=auth_headers,
    )
    assert response.status_code == 422


@patch("compliance_gateway.infrastructure.clients.xero.XeroClient.get_bas_report", new_callable=AsyncMock)
def test_get_history_endpoint(mock_report: AsyncMock, client: TestClient, auth_headers, xero_report):
    """Test GET /v1/bas/history"""
    mock_report.return_value = xero_report

    client.post("/v1/xero/sync/bas/tenant-1", json={"period": "Q2 FY2024–25"}, headers=auth_headers)
    client.post("/v1/xero/sync/bas/tenant-1", json={"period": "Q3 FY2024–25"}, headers=auth_headers)
    client.post("/v1/xero/sync/bas/tenant-2", headers=auth_headers)

    response = client.get("/v1/bas/history?source_id=tenant-1")

    assert response.status_code == 200
    data = response.json()
    assert data["source_id"] == "tenant-1"
    assert len(data["snapshots"]) == 2
    assert {s["period"] for s in data["snapshots"]} == {"Q2 FY2024–25", "Q3 FY2024–25"}
    assert all(float(s["net_payable"]) == 9510 for s in data["snapshots"])


def test_risk_score_endpoint(client: TestClient):
    response = client.post(
        "/v1/risk/score",
        json={
            "days_until_next_deadline": 2,
            "open_obligations_count": 3,
            "employee_count": 25,
            "has_ignored_recent_reminder": True,
            "late_lodgement_history_count": 2,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 100
    assert data["level"] == "high"
    assert data["label"] == "100 HIGH"
    assert len(data["reasons"]) == 5


def test_risk_score_endpoint_defaults(client: TestClient):
    data = client.post("/v1/risk/score", json={}).json()

    assert data["score"] == 0
    assert data["level"] == "low"
    assert data["reasons"] == ["On track — no risk flags"]


def test_risk_score_rejects_negative_counts(client: TestClient):
    response = client.post("/v1/risk/score", json={"employee_count": -1})
    assert response.status_code == 422


def test_risk_rank_endpoint_is_stable(client: TestClient):
    response = client.post(
        "/v1/risk/rank",
        json={
            "clients": [
                {"client_id": "peak-fitness", "signals": {"days_until_next_deadline": 45}},
                {"client_id": "wilson-landscaping", "signals": {"days_until_next_deadline": 6}},
                {"client_id": "smith-plumbing", "signals": {"days_until_next_deadline": 2, "open_obligations_count": 2}},
                {"client_id": "jones-electrical", "signals": {"days_until_next_deadline": 7}},
                {"client_id": "no-signals"},
            ]
        },
    )

    assert response.status_code == 200
    ranked = response.json()["clients"]
    assert [c["client_id"] for c in ranked] == [
        "smith-plumbing",
        "wilson-landscaping",
        "jones-electrical",
        "peak-fitness",
        "no-signals",
    ]
    assert ranked[0]["risk"]["score"] == 57
    assert ranked[0]["risk"]["level"] == "medium"
