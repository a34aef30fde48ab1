"""Per-edge constraint arithmetic shared by the scheduling passes.

For an edge pred -> succ the constraint is
``succ.<constrained> >= pred.<anchor> + lag`` where the anchor is the
predecessor's finish for FS/FF and its start for SS/SF, and the constrained
date is the successor's start for FS/SS and its finish for FF/SF.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from critpath.calendar import WorkingTimeCalendar, shift
from critpath.models import Dependency


def start_floor(
    dep: Dependency,
    pred_start: datetime,
    pred_finish: datetime,
    succ_duration: timedelta,
    calendar: WorkingTimeCalendar,
) -> datetime:
    """Earliest successor start allowed by this edge."""
    anchor = pred_finish if dep.type.anchored_on_finish else pred_start
    bound = shift(calendar, anchor, dep.lag)
    if dep.type.constrains_start:
        return bound
    return calendar.subtract_working_time(bound, succ_duration)


def finish_ceiling(
    dep: Dependency,
    succ_start: datetime,
    succ_finish: datetime,
    pred_duration: timedelta,
    calendar: WorkingTimeCalendar,
) -> datetime:
    """Latest predecessor finish allowed by this edge."""
    constrained = succ_start if dep.type.constrains_start else succ_finish
    bound = shift(calendar, constrained, -dep.lag)
    if dep.type.anchored_on_finish:
        return bound
    return calendar.add_working_time(bound, pred_duration)


def edge_slack(
    dep: Dependency,
    pred_start: datetime,
    pred_finish: datetime,
    succ_start: datetime,
    succ_finish: datetime,
    calendar: WorkingTimeCalendar,
) -> timedelta:
    """Working time by which the successor clears this edge (negative if violated)."""
    anchor = pred_finish if dep.type.anchored_on_finish else pred_start
    bound = shift(calendar, anchor, dep.lag)
    constrained = succ_start if dep.type.constrains_start else succ_finish
    return calendar.working_time_between(bound, constrained)
