"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

ZERO = Decimal("0")


class BASSource(str, Enum):
    """Accounting platform a BAS summary was derived from"""

    XERO = "xero"
    MYOB = "myob"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class BASSummary:
    """
    Canonical Business Activity Statement figures for one reporting period.

    net_payable and refund are derived from the GST fields and can never be
    supplied independently. capital_purchases / gst_on_capital are None when
    the source platform does not distinguish capital items (MYOB).
    """

    source: BASSource
    period: str
    total_sales: Decimal = ZERO
    gst_on_sales: Decimal = ZERO
    total_purchases: Decimal = ZERO
    gst_on_purchases: Decimal = ZERO
    payg_withheld: Decimal = ZERO
    capital_purchases: Optional[Decimal] = None
    gst_on_capital: Optional[Decimal] = None
    note: Optional[str] = None

    @property
    def net_payable(self) -> Decimal:
        return self.gst_on_sales + (self.gst_on_capital or ZERO) - self.gst_on_purchases

    @property
    def refund(self) -> bool:
        return self.net_payable < 0

    def to_rows(self) -> Dict[str, Any]:
        """Flat row mapping in the field naming each platform's BAS screen uses"""
        if self.source == BASSource.XERO:
            rows: Dict[str, Any] = {
                "G1_totalSales": self.total_sales,
                "G3_gstOnSales": self.gst_on_sales,
                "G10_capitalItems": self.capital_purchases or ZERO,
                "G11_gstOnCapital": self.gst_on_capital or ZERO,
                "G20_totalPurchases": self.total_purchases,
                "G21_gstOnPurchases": self.gst_on_purchases,
                "W1_paygWithheld": self.payg_withheld,
            }
        else:
            rows = {
                "totalSales": self.total_sales,
                "gstOnSales": self.gst_on_sales,
                "totalPurchases": self.total_purchases,
                "gstOnPurchases": self.gst_on_purchases,
                "paygWithheld": self.payg_withheld,
            }
        rows["netPayable"] = self.net_payable
        rows["refund"] = self.refund
        return rows


def _as_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


_TRUE_STRINGS = {"true", "1", "yes", "y", "on"}
_FALSE_STRINGS = {"false", "0", "no", "n", "off", ""}


def _as_bool(value: Any, default: bool = False) -> bool:
    """Read a flag sent as a bool, a number, or a string form ("false", "Yes", "0")"""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return default


@dataclass(frozen=True)
class RiskSignals:
    """Behavioural/structural signals for one client's compliance risk"""

    days_until_next_deadline: Optional[int] = 999
    open_obligations_count: int = 0
    employee_count: int = 0
    has_ignored_recent_reminder: bool = False
    late_lodgement_history_count: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RiskSignals":
        """Build signals from a loosely typed client snapshot, defaulting anything unreadable"""
        return cls(
            days_until_next_deadline=_as_int(data.get("days_until_next_deadline"), 999),
            open_obligations_count=_as_int(data.get("open_obligations_count"), 0),
            employee_count=_as_int(data.get("employee_count"), 0),
            has_ignored_recent_reminder=_as_bool(data.get("has_ignored_recent_reminder")),
            late_lodgement_history_count=_as_int(data.get("late_lodgement_history_count"), 0),
        )


@dataclass(frozen=True)
class RiskResult:
    """Output of compliance risk scoring"""

    score: int
    level: RiskLevel
    reasons: List[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        suffix = {RiskLevel.HIGH: "HIGH", RiskLevel.MEDIUM: "MED", RiskLevel.LOW: "LOW"}[self.level]
        return f"{self.score} {suffix}"


@dataclass(frozen=True)
class RankedClient:
    """One entry of a risk ranking"""

    client_id: str
    signals: RiskSignals
    risk: RiskResult
