"""Compliance risk scoring engine - ranks clients by how likely they are to miss a deadline"""

from typing import Iterable, List, Optional, Tuple

from compliance_gateway.domain.models import RankedClient, RiskLevel, RiskResult, RiskSignals

MAX_SCORE = 100
HIGH_THRESHOLD = 60
MEDIUM_THRESHOLD = 30
NO_DEADLINE_DAYS = 999
NO_RISK_REASON = "On track — no risk flags"


def _deadline_band(days: Optional[int]) -> Tuple[int, Optional[str]]:
    # 0 days is treated the same as "no deadline recorded"
    days = days or NO_DEADLINE_DAYS
    if days <= 3:
        return 45, "Deadline within 3 days"
    if days <= 7:
        return 32, "Deadline this week"
    if days <= 14:
        return 18, "Deadline within 2 weeks"
    if days <= 30:
        return 8, None
    return 0, None


def _obligations_band(open_obligations: int) -> Tuple[int, Optional[str]]:
    if open_obligations >= 3:
        return 20, "3+ open obligations"
    if open_obligations == 2:
        return 12, "Multiple open obligations"
    if open_obligations == 1:
        return 6, None
    return 0, None


def _payroll_band(employees: int) -> Tuple[int, Optional[str]]:
    if employees >= 20:
        return 15, "Large payroll (20+ staff)"
    if employees >= 10:
        return 10, "Medium payroll (10+ staff)"
    if employees >= 5:
        return 5, None
    return 0, None


def _reminder_band(ignored_reminder: bool) -> Tuple[int, Optional[str]]:
    if ignored_reminder:
        return 12, "Not responding to reminders"
    return 0, None


def _late_history_band(late_count: int) -> Tuple[int, Optional[str]]:
    if late_count >= 2:
        return 8, "Previously late 2+ times"
    if late_count == 1:
        return 4, None
    return 0, None


def determine_risk_level(score: int) -> RiskLevel:
    """
    Map a clamped score to a risk level.

    - 60+:   high
    - 30-59: medium
    - <30:   low
    """
    if score >= HIGH_THRESHOLD:
        return RiskLevel.HIGH
    elif score >= MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    else:
        return RiskLevel.LOW


def score_client_risk(signals: RiskSignals) -> RiskResult:
    """
    Score a client 0-100 for compliance risk this period. Higher = more at risk.

    Bands (each category contributes independently; within a category only the
    highest matching tier applies):
    - Deadline proximity:      <=3d 45, <=7d 32, <=14d 18, <=30d 8
    - Open obligations:        3+ 20, 2 12, 1 6
    - Payroll size:            20+ 15, 10+ 10, 5+ 5
    - Ignored recent reminder: 12
    - Late lodgement history:  2+ 8, 1 4

    The band sum is clamped to 100 after summation. Reasons follow band order.
    """
    bands = [
        _deadline_band(signals.days_until_next_deadline),
        _obligations_band(signals.open_obligations_count or 0),
        _payroll_band(signals.employee_count or 0),
        _reminder_band(bool(signals.has_ignored_recent_reminder)),
        _late_history_band(signals.late_lodgement_history_count or 0),
    ]

    score = min(MAX_SCORE, sum(points for points, _ in bands))
    reasons = [reason for _, reason in bands if reason]

    return RiskResult(
        score=score,
        level=determine_risk_level(score),
        reasons=reasons or [NO_RISK_REASON],
    )


def rank_clients_by_risk(clients: Iterable[Tuple[str, RiskSignals]]) -> List[RankedClient]:
    """
    Score every client and order by descending score.

    sorted() is stable, so clients with equal scores keep their input order.
    """
    ranked = [
        RankedClient(client_id=client_id, signals=signals, risk=score_client_risk(signals))
        for client_id, signals in clients
    ]
    return sorted(ranked, key=lambda c: c.risk.score, reverse=True)
