from fastapi import FastAPI, Header, HTTPException

app = FastAPI(title="Mock Accounting Vendors", version="1.0.0")

# Xero figures match the sample BAS shown on the bookkeeper dashboard; MYOB records net to 5,891 payable
XERO_BAS_REPORT = {
    "ReportID": "BASorGST",
    "ReportName": "Activity Statement",
    "ReportTitles": ["Activity Statement", "Demo Company (AU)", "1 January 2025 to 31 March 2025"],
    "Rows": [
        {"RowType": "Header", "Cells": [{"Value": ""}, {"Value": "Amount"}]},
        {
            "RowType": "Section",
            "Title": "GST",
            "Rows": [
                {"RowType": "Row", "Cells": [{"Value": "G1 Total sales"}, {"Value": "$148,500.00"}]},
                {"RowType": "Row", "Cells": [{"Value": "G3 GST on sales"}, {"Value": "$13,500.00"}]},
                {"RowType": "Row", "Cells": [{"Value": "G10 Capital purchases"}, {"Value": "$2,100.00"}]},
                {"RowType": "Row", "Cells": [{"Value": "G11 GST on capital purchases"}, {"Value": "$210.00"}]},
                {"RowType": "Row", "Cells": [{"Value": "G20 Total purchases"}, {"Value": "$46,000.00"}]},
                {"RowType": "Row", "Cells": [{"Value": "G21 GST on purchases"}, {"Value": "$4,200.00"}]},
            ],
        },
        {
            "RowType": "Section",
            "Title": "PAYG withholding",
            "Rows": [
                {"RowType": "Row", "Cells": [{"Value": "W1 PAYG withheld"}, {"Value": "$12,400.00"}]},
            ],
        },
    ],
}

MYOB_ITEMS = {
    "Sale/Invoice": [
        {"Number": "00000101", "TotalAmount": 88000.00, "TaxCode": {"Code": "GST"}, "Freight": {"TaxAmount": 8000.00}},
        {"Number": "00000102", "TotalAmount": 8200.00, "TaxCode": {"Code": "GST"}, "Freight": {"TaxAmount": 745.00}},
    ],
    "Purchase/Bill": [
        {"Number": "00000201", "TotalAmount": 28000.00, "TaxCode": {"Code": "GST"}, "FreightTaxAmount": 2545.00},
        {"Number": "00000202", "TotalAmount": 3400.00, "TaxCode": {"Code": "GST"}, "FreightTaxAmount": 309.00},
    ],
    "Payroll/Timesheet": [
        {"Employee": "E001", "GrossWages": 30000.00, "NetWages": 24500.00},
        {"Employee": "E002", "GrossWages": 12000.00, "NetWages": 9300.00},
    ],
}


def _require_token(authorization: str | None) -> None:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="missing bearer token")


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/xero/Reports/{report_id}")
def xero_report(report_id: str, authorization: str | None = Header(None), xero_tenant_id: str | None = Header(None)):
    _require_token(authorization)
    if report_id != "BASorGST":
        raise HTTPException(status_code=404, detail="report not found")
    if xero_tenant_id == "tenant-broken":
        return {"Reports": [{"ReportID": "BASorGST", "Rows": "unavailable"}]}
    if xero_tenant_id == "tenant-down":
        raise HTTPException(status_code=502, detail="upstream unavailable")
    return {"Reports": [XERO_BAS_REPORT]}


@app.get("/myob/{company_file_id}/{area}/{collection}")
def myob_collection(company_file_id: str, area: str, collection: str, authorization: str | None = Header(None)):
    _require_token(authorization)
    key = f"{area}/{collection}"
    if key not in MYOB_ITEMS:
        raise HTTPException(status_code=404, detail="collection not found")
    if company_file_id == "cf-empty":
        return {"Items": [], "Count": 0}
    return {"Items": MYOB_ITEMS[key], "Count": len(MYOB_ITEMS[key])}
