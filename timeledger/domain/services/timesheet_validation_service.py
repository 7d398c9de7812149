"""Timesheet validation service.
Checks a week of entries against the tenant policy before submission.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from timeledger.domain.models.time_entry import TimeEntry
from timeledger.domain.models.timesheet import Timesheet
from timeledger.domain.models.value_objects import TimesheetPolicy, round_hours, to_decimal


WORKING_DAYS = (1, 2, 3, 4, 5)
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


class TimesheetValidationService:
    """
    Domain service producing a validation report for one timesheet.
    Errors make the timesheet invalid; warnings are informational.
    """

    def __init__(self, expected_weekly_hours: float = 40.0):
        self.expected_weekly_hours = to_decimal(expected_weekly_hours)

    def validate(
        self,
        timesheet: Timesheet,
        entries: Sequence[TimeEntry],
        policy: Optional[TimesheetPolicy] = None
    ) -> Dict[str, Any]:
        """
        Build ``{valid, errors, warnings, summary}`` for the timesheet's week.
        The daily ceiling is only checked when the tenant has a policy defining one.
        """
        daily: Dict[int, Decimal] = defaultdict(Decimal)
        for entry in entries:
            daily[entry.day_of_week] += entry.hours
        total = sum(daily.values(), Decimal("0"))

        errors: List[Dict[str, Any]] = []
        warnings: List[Dict[str, Any]] = []

        if policy is not None and policy.max_hours_per_day is not None:
            ceiling = to_decimal(policy.max_hours_per_day)
            for day_of_week in sorted(daily):
                hours = daily[day_of_week]
                if hours > ceiling:
                    errors.append({
                        "type": "max_hours_exceeded",
                        "severity": "error",
                        "message": (
                            f"{DAY_NAMES[day_of_week]} has {round_hours(hours)} hours, "
                            f"exceeding the maximum of {round_hours(ceiling)}"
                        ),
                        "day_of_week": day_of_week,
                        "date": timesheet.week.date_for(day_of_week).isoformat(),
                        "hours": round_hours(hours),
                        "max_allowed": round_hours(ceiling),
                    })

        for day_of_week in WORKING_DAYS:
            if day_of_week not in daily:
                warnings.append({
                    "type": "no_entries",
                    "severity": "warning",
                    "message": f"No time logged for {DAY_NAMES[day_of_week]}",
                    "day_of_week": day_of_week,
                    "date": timesheet.week.date_for(day_of_week).isoformat(),
                })

        if total < self.expected_weekly_hours:
            warnings.append({
                "type": "low_hours",
                "severity": "warning",
                "message": (
                    f"Total hours ({round_hours(total)}) are below the expected "
                    f"{round_hours(self.expected_weekly_hours)} hours"
                ),
                "hours": round_hours(total),
            })

        return {
            "valid": not errors,
            "errors": errors,
            "warnings": warnings,
            "summary": {
                "total_hours": round_hours(total),
                "days_with_entries": len(daily),
                "entry_count": len(entries),
                "project_count": len({entry.project_id for entry in entries}),
                "status": timesheet.status.value,
            },
        }
