"""Tests for turning a calendar selection into appointment drafts."""

from collections import Counter
from datetime import date, datetime, time
from types import SimpleNamespace

import pytest

from dispatch.exceptions import ValidationError
from dispatch.services.dates import AllDay, Timed
from dispatch.services.range_expander import (
    DEFAULT_VEHICLE_COLOR,
    UNASSIGNED_TASK,
    UNKNOWN_VEHICLE,
    DayConfig,
    SelectionRequest,
    expand_selection,
    missing_fields,
    new_group_id,
)

VEHICLES = [
    SimpleNamespace(id=1, name="Van 1", color="#ff0000"),
    SimpleNamespace(id=2, name="Truck", color="#00ff00"),
]


def sequential_ids():
    counter = iter(range(1, 1000))
    return lambda prefix: f"{prefix}-{next(counter)}"


def request(dates, vehicle_ids=(1, 2), **kwargs):
    values = dict(task="Install", worker_ids=(5, 6), vehicle_ids=tuple(vehicle_ids))
    values.update(kwargs)
    return SelectionRequest(dates=tuple(dates), **values)


def test_selection_with_gap_two_vehicles():
    dates = [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 5)]
    drafts = expand_selection(request(dates), VEHICLES, id_factory=sequential_ids())

    assert len(drafts) == 6
    groups = {d.multi_day_group_id for d in drafts if d.multi_day_group_id}
    assert len(groups) == 2
    assert sum(1 for d in drafts if d.multi_day_group_id is None) == 2
    assert len({d.job_group_id for d in drafts}) == 1


def test_expansion_cardinality_and_flags():
    dates = [date(2024, 3, d) for d in (1, 2, 3, 7, 8, 12)]
    drafts = expand_selection(request(dates), VEHICLES)

    assert len(drafts) == len(dates) * len(VEHICLES)
    runs = Counter((d.vehicle_id, d.multi_day_group_id or d.day) for d in drafts)
    firsts = Counter((d.vehicle_id, d.multi_day_group_id or d.day) for d in drafts if d.is_first_day)
    lasts = Counter((d.vehicle_id, d.multi_day_group_id or d.day) for d in drafts if d.is_last_day)
    assert set(firsts) == set(runs) and set(firsts.values()) == {1}
    assert set(lasts) == set(runs) and set(lasts.values()) == {1}


def test_draft_fields():
    drafts = expand_selection(
        request([date(2024, 3, 1)], vehicle_ids=[2], notes="Bring ladder"),
        VEHICLES,
    )
    (draft,) = drafts
    assert draft.title == "Install"
    assert draft.equipment == "Truck"
    assert draft.color == "#00ff00"
    assert draft.vehicle_id == 2
    assert draft.workers == (5, 6)
    assert draft.notes == "Bring ladder"
    assert draft.slot == AllDay(date(2024, 3, 1))
    assert draft.multi_day_group_id is None
    assert draft.is_first_day and draft.is_last_day


def test_unknown_vehicle_falls_back():
    (draft,) = expand_selection(request([date(2024, 3, 1)], vehicle_ids=[42]), VEHICLES)
    assert draft.equipment == UNKNOWN_VEHICLE
    assert draft.color == DEFAULT_VEHICLE_COLOR
    assert draft.vehicle_id is None


def test_empty_task_gets_placeholder_title():
    (draft,) = expand_selection(request([date(2024, 3, 1)], vehicle_ids=[1], task="  "), VEHICLES)
    assert draft.title == UNASSIGNED_TASK


def test_duplicate_vehicles_and_dates_are_ignored():
    dates = [date(2024, 3, 1), date(2024, 3, 1)]
    drafts = expand_selection(request(dates, vehicle_ids=[1, 1]), VEHICLES)
    assert len(drafts) == 1


def test_per_day_times():
    day = date(2024, 3, 1)
    configs = {day: DayConfig(day, all_day=False, start_time=time(7, 0), end_time=time(12, 0))}
    dates = [day, date(2024, 3, 2)]
    drafts = expand_selection(request(dates, vehicle_ids=[1], day_configs=configs), VEHICLES)

    assert drafts[0].slot == Timed(datetime(2024, 3, 1, 7, 0), datetime(2024, 3, 1, 12, 0))
    assert drafts[1].slot == AllDay(date(2024, 3, 2))


def test_day_config_default_hours():
    slot = DayConfig(date(2024, 3, 1), all_day=False).slot()
    assert slot.as_strings() == ("2024-03-01T08:00", "2024-03-01T16:00")


def test_day_config_rejects_reversed_times():
    with pytest.raises(ValidationError):
        DayConfig(date(2024, 3, 1), all_day=False, start_time=time(16, 0), end_time=time(8, 0))


def test_missing_fields():
    assert missing_fields(request([date(2024, 3, 1)])) == []
    empty = SelectionRequest(dates=(date(2024, 3, 1),))
    assert missing_fields(empty) == ["task", "workers", "vehicles"]


def test_no_vehicles_produces_no_drafts():
    assert expand_selection(request([date(2024, 3, 1)], vehicle_ids=[]), VEHICLES) == []


def test_new_group_id_prefix():
    first, second = new_group_id("job"), new_group_id("job")
    assert first.startswith("job-")
    assert first != second
