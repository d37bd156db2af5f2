"""
Turn a calendar selection into appointment drafts.

A selection is a set of days (possibly with gaps), one task, the crew and
one or more vehicles. Every (vehicle, day) pair becomes one draft. Days
are split into runs of consecutive days; each run of two or more days
becomes one multi-day group per vehicle. All drafts of one selection
share a single job_group_id so the job can be removed in one go.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, time
from typing import Any, Callable, Iterable, Mapping, Optional

from dispatch.exceptions import ValidationError
from dispatch.services.dates import AllDay, ScheduleSlot, Timed, contiguous_runs
from dispatch.services.entries import AppointmentDraft

DEFAULT_START_TIME = time(8, 0)
DEFAULT_END_TIME = time(16, 0)
DEFAULT_VEHICLE_COLOR = "#3b82f6"
UNKNOWN_VEHICLE = "Unknown vehicle"
UNASSIGNED_TASK = "Unassigned job"


def new_group_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


@dataclass(frozen=True)
class DayConfig:
    """Per-day choice between all-day and a clock-time window."""

    day: date
    all_day: bool = True
    start_time: time = DEFAULT_START_TIME
    end_time: time = DEFAULT_END_TIME

    def __post_init__(self):
        if not self.all_day and self.end_time <= self.start_time:
            raise ValidationError(
                f"End time must be after start time on {self.day.isoformat()}"
            )

    def slot(self) -> ScheduleSlot:
        if self.all_day:
            return AllDay(self.day)
        return Timed.on(self.day, self.start_time, self.end_time)


@dataclass(frozen=True)
class SelectionRequest:
    dates: tuple[date, ...]
    task: str = ""
    worker_ids: tuple[int, ...] = ()
    vehicle_ids: tuple[int, ...] = ()
    notes: str = ""
    day_configs: Mapping[date, DayConfig] = field(default_factory=dict)

    def config_for(self, day: date) -> DayConfig:
        return self.day_configs.get(day) or DayConfig(day)


def missing_fields(request: SelectionRequest) -> list[str]:
    """
    Soft-validation warnings for a selection.

    Drafts can still be produced when fields are missing; the caller asks
    for confirmation first.
    """
    warnings = []
    if not request.task.strip():
        warnings.append("task")
    if not request.worker_ids:
        warnings.append("workers")
    if not request.vehicle_ids:
        warnings.append("vehicles")
    return warnings


def _unique(values: Iterable[Any]) -> list[Any]:
    seen: list[Any] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def expand_selection(
    request: SelectionRequest,
    vehicles: Iterable[Any],
    id_factory: Optional[Callable[[str], str]] = None,
) -> list[AppointmentDraft]:
    """
    One draft per (selected vehicle, selected day).

    ``vehicles`` is the vehicle catalogue (objects with id, name, color).
    ``id_factory`` receives "job" or "group" and returns a fresh id; it
    defaults to prefixed random UUIDs.
    """
    make_id = id_factory or new_group_id
    catalogue = {vehicle.id: vehicle for vehicle in vehicles}
    runs = contiguous_runs(request.dates)
    job_group_id = make_id("job")
    title = request.task.strip() or UNASSIGNED_TASK
    workers = tuple(_unique(request.worker_ids))

    drafts: list[AppointmentDraft] = []
    for vehicle_id in _unique(request.vehicle_ids):
        vehicle = catalogue.get(vehicle_id)
        name = vehicle.name if vehicle is not None else UNKNOWN_VEHICLE
        color = (vehicle.color if vehicle is not None else None) or DEFAULT_VEHICLE_COLOR

        for run in runs:
            group_id = make_id("group") if len(run) > 1 else None
            for position, day in enumerate(run):
                drafts.append(
                    AppointmentDraft(
                        title=title,
                        location=title,
                        slot=request.config_for(day).slot(),
                        color=color,
                        equipment=name,
                        vehicle_id=vehicle_id if vehicle is not None else None,
                        workers=workers,
                        notes=request.notes,
                        multi_day_group_id=group_id,
                        is_first_day=position == 0,
                        is_last_day=position == len(run) - 1,
                        job_group_id=job_group_id,
                    )
                )

    return drafts
