"""BAS normalization - maps platform-specific accounting data onto one canonical BASSummary"""

from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from compliance_gateway.domain.exceptions import MalformedSourceData
from compliance_gateway.domain.models import BASSource, BASSummary, ZERO
from compliance_gateway.utils.money import parse_money

DEFAULT_PERIOD = "Current Quarter"
MYOB_NOTE = "Computed from MYOB transaction data — review before lodging."

# Xero BASorGST report row labels -> BASSummary fields
XERO_ROW_LABELS = {
    "total_sales": "G1 Total sales",
    "gst_on_sales": "G3 GST on sales",
    "capital_purchases": "G10 Capital purchases",
    "gst_on_capital": "G11 GST on capital purchases",
    "total_purchases": "G20 Total purchases",
    "gst_on_purchases": "G21 GST on purchases",
    "payg_withheld": "W1 PAYG withheld",
}

GST_TAX_CODE = "GST"


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _report_rows(report: Any) -> Sequence[Any]:
    if not isinstance(report, Mapping):
        raise MalformedSourceData(f"Xero report must be an object, got {type(report).__name__}")
    rows = report.get("Rows")
    if not _is_sequence(rows):
        raise MalformedSourceData("Xero report has no Rows list")
    return rows


def _find_row_value(rows: Iterable[Any], row_label: str) -> Optional[Any]:
    """Depth-first scan: a row's own cells are checked before its child rows"""
    for row in rows:
        if not isinstance(row, Mapping):
            continue

        cells = row.get("Cells")
        if _is_sequence(cells) and cells and isinstance(cells[0], Mapping):
            if cells[0].get("Value") == row_label:
                value_cell = cells[1] if len(cells) > 1 else None
                value = value_cell.get("Value") if isinstance(value_cell, Mapping) else None
                return "" if value is None else value

        children = row.get("Rows")
        if _is_sequence(children):
            found = _find_row_value(children, row_label)
            if found is not None:
                return found
    return None


def extract_cell(report: Mapping[str, Any], row_label: str) -> Decimal:
    """
    Amount of the first report row whose label matches `row_label` exactly.

    A row that is absent (Xero omits zero-value rows) or whose amount cannot
    be parsed yields 0. Raises MalformedSourceData only when `report` itself
    is not a report object.
    """
    return parse_money(_find_row_value(_report_rows(report), row_label))


def report_period(report: Mapping[str, Any]) -> Optional[str]:
    """Period covered by a Xero report, read from its titles ("1 January 2025 to 31 March 2025")"""
    titles = report.get("ReportTitles")
    if not _is_sequence(titles):
        return None
    for title in titles:
        if isinstance(title, str) and " to " in title:
            return title.strip()
    return None


def normalize_xero_bas(report: Mapping[str, Any], period: Optional[str] = None) -> BASSummary:
    """
    Build a BASSummary from a Xero BASorGST report.

    Without an explicit label the period comes from the report's own titles,
    since Xero decides which period the report covers.

    Xero distinguishes capital purchases, so both capital fields are always
    present and GST on capital counts toward net payable.
    """
    _report_rows(report)
    values = {name: extract_cell(report, label) for name, label in XERO_ROW_LABELS.items()}
    period = period or report_period(report) or DEFAULT_PERIOD
    return BASSummary(source=BASSource.XERO, period=period, **values)


def _tax_code(record: Mapping[str, Any]) -> Optional[str]:
    code = record.get("TaxCode")
    if isinstance(code, Mapping):
        code = code.get("Code")
    return code if isinstance(code, str) else None


def _tax_amount(record: Mapping[str, Any]) -> Decimal:
    freight = record.get("Freight")
    if isinstance(freight, Mapping) and "TaxAmount" in freight:
        return parse_money(freight.get("TaxAmount"))
    return parse_money(record.get("FreightTaxAmount"))


def _records(records: Any, name: str) -> List[Mapping[str, Any]]:
    if not _is_sequence(records):
        raise MalformedSourceData(f"MYOB {name} must be a list of records")
    return [r for r in records if isinstance(r, Mapping)]


def _total_and_gst(records: List[Mapping[str, Any]]) -> tuple[Decimal, Decimal]:
    total = sum((parse_money(r.get("TotalAmount")) for r in records), ZERO)
    gst = sum((_tax_amount(r) for r in records if _tax_code(r) == GST_TAX_CODE), ZERO)
    return total, gst


def _readable(value: Any) -> bool:
    return value is not None and not isinstance(value, bool) and any(ch.isdigit() for ch in str(value))


def _withheld(record: Mapping[str, Any]) -> Decimal:
    gross, net = record.get("GrossWages"), record.get("NetWages")
    if not (_readable(gross) and _readable(net)):
        return ZERO
    return parse_money(gross) - parse_money(net)


def normalize_myob_bas(
    sales: Sequence[Mapping[str, Any]],
    purchases: Sequence[Mapping[str, Any]],
    payroll: Sequence[Mapping[str, Any]],
    period: Optional[str] = None,
) -> BASSummary:
    """
    Build a BASSummary by aggregating raw MYOB sales, purchase and payroll records.

    Totals include every row regardless of tax code; GST sums only rows coded
    "GST". MYOB has no capital-item distinction, so the capital fields stay
    absent and net payable is GST on sales less GST on purchases.
    """
    sale_rows = _records(sales, "sales")
    purchase_rows = _records(purchases, "purchases")
    payroll_rows = _records(payroll, "payroll")

    total_sales, gst_on_sales = _total_and_gst(sale_rows)
    total_purchases, gst_on_purchases = _total_and_gst(purchase_rows)
    payg_withheld = sum((_withheld(r) for r in payroll_rows), ZERO)

    return BASSummary(
        source=BASSource.MYOB,
        period=period or DEFAULT_PERIOD,
        total_sales=total_sales,
        gst_on_sales=gst_on_sales,
        total_purchases=total_purchases,
        gst_on_purchases=gst_on_purchases,
        payg_withheld=payg_withheld,
        note=MYOB_NOTE,
    )


def _normalize_xero_payload(raw: Any, period: Optional[str]) -> BASSummary:
    return normalize_xero_bas(raw, period=period)


def _normalize_myob_payload(raw: Any, period: Optional[str]) -> BASSummary:
    if not isinstance(raw, Mapping):
        raise MalformedSourceData("MYOB payload must be an object with sales, purchases and payroll")
    return normalize_myob_bas(raw.get("sales"), raw.get("purchases"), raw.get("payroll"), period=period)


SOURCE_ADAPTERS: Dict[BASSource, Callable[[Any, Optional[str]], BASSummary]] = {
    BASSource.XERO: _normalize_xero_payload,
    BASSource.MYOB: _normalize_myob_payload,
}


def normalize_bas(source: BASSource, raw: Any, period: Optional[str] = None) -> BASSummary:
    """
    Normalize raw platform data through the adapter registered for `source`.

    Xero payloads are the report object; MYOB payloads are a mapping with
    "sales", "purchases" and "payroll" record lists.
    """
    return SOURCE_ADAPTERS[BASSource(source)](raw, period)
