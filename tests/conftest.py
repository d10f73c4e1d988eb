"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from typing import Any, Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from compliance_gateway.api.main import create_app
from compliance_gateway.infrastructure.database.models import Base
from compliance_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

AUTH_HEADERS = {"Authorization": "Bearer test-access-token"}


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db: Session):
    """FastAPI app wired to the test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return dict(AUTH_HEADERS)


def xero_row(label: str, value: str) -> Dict[str, Any]:
    return {"RowType": "Row", "Cells": [{"Value": label}, {"Value": value}]}


@pytest.fixture
def xero_report() -> Dict[str, Any]:
    """Xero BASorGST report for Q3 FY2024-25"""
    return {
        "ReportID": "BASorGST",
        "Rows": [
            {"RowType": "Header", "Cells": [{"Value": ""}, {"Value": "Amount"}]},
            {
                "RowType": "Section",
                "Title": "GST",
                "Rows": [
                    xero_row("G1 Total sales", "$148,500.00"),
                    xero_row("G3 GST on sales", "$13,500.00"),
                    xero_row("G10 Capital purchases", "$2,100.00"),
                    xero_row("G11 GST on capital purchases", "$210.00"),
                    xero_row("G20 Total purchases", "$46,000.00"),
                    xero_row("G21 GST on purchases", "$4,200.00"),
                ],
            },
            {
                "RowType": "Section",
                "Title": "PAYG withholding",
                "Rows": [xero_row("W1 PAYG withheld", "$12,400.00")],
            },
        ],
    }


@pytest.fixture
def myob_inputs() -> Dict[str, List[Dict[str, Any]]]:
    """Raw MYOB records that aggregate to the dashboard sample BAS"""
    return {
        "sales": [
            {"TotalAmount": 88000.00, "TaxCode": {"Code": "GST"}, "Freight": {"TaxAmount": 8000.00}},
            {"TotalAmount": 8200.00, "TaxCode": "GST", "Freight": {"TaxAmount": 745.00}},
        ],
        "purchases": [
            {"TotalAmount": 28000.00, "TaxCode": "GST", "FreightTaxAmount": 2545.00},
            {"TotalAmount": 3400.00, "TaxCode": {"Code": "GST"}, "FreightTaxAmount": 309.00},
        ],
        "payroll": [
            {"GrossWages": 30000.00, "NetWages": 24500.00},
            {"GrossWages": 12000.00, "NetWages": 9300.00},
        ],
    }
