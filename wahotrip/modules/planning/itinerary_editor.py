"""
modules/planning/itinerary_editor.py
------------------------------------
Customization operations on a selected package.

  replace_hotel / replace_transport  pure reference swap; the resource must exist
  toggle_attraction                  remove always allowed; add rejected when the day's
                                     cumulative duration would be strictly over the cap
  update_day                         free-text title / description overwrite

Every accepted mutation recomputes the day breakdowns and the package total.
Rule violations come back as MutationResult(accepted=False); unknown days or
resources raise, since those are caller errors rather than user choices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from wahotrip import config
from wahotrip.modules.planning.cost_calculator import CostCalculator
from wahotrip.modules.planning.duration import parse_duration_hours, total_hours
from wahotrip.modules.planning.resource_picks import entry_from_row, hotel_choice, transport_choice
from wahotrip.schemas.itinerary import DayPlan, ItineraryPackage
from wahotrip.schemas.resources import ResourceBundle

logger = logging.getLogger(__name__)


class DayNotFoundError(LookupError):
    def __init__(self, day: int):
        super().__init__(f"Day {day} is not part of this itinerary")
        self.day = day


class ResourceNotFoundError(LookupError):
    def __init__(self, kind: str, name: str):
        super().__init__(f"Unknown {kind}: {name!r}")
        self.kind = kind
        self.name = name


@dataclass
class MutationResult:
    accepted: bool
    action: str
    day: int
    message: str = ""
    day_hours: float = 0.0


class ItineraryEditor:
    def __init__(self, resources: ResourceBundle, hours_cap: Optional[float] = None):
        self._resources = resources
        self._calculator = CostCalculator(resources)
        self._hours_cap = config.DAILY_HOURS_CAP if hours_cap is None else hours_cap

    @staticmethod
    def _day(package: ItineraryPackage, day: int) -> DayPlan:
        plan = package.get_day(day)
        if plan is None:
            raise DayNotFoundError(day)
        return plan

    @staticmethod
    def day_hours(plan: DayPlan) -> float:
        return total_hours([a.duration for a in plan.attractions])

    def would_exceed_cap(self, plan: DayPlan, duration: str) -> bool:
        added = parse_duration_hours(duration or config.DEFAULT_ATTRACTION_DURATION)
        return self.day_hours(plan) + added > self._hours_cap

    def _done(self, package: ItineraryPackage, plan: DayPlan, action: str, message: str) -> MutationResult:
        self._calculator.apply(package)
        logger.debug("Day %d %s: %s", plan.day, action, message)
        return MutationResult(True, action, plan.day, message, self.day_hours(plan))

    # ── operations ──────────────────────────────────────────────────────────

    def replace_hotel(self, package: ItineraryPackage, day: int, hotel_name: str) -> MutationResult:
        plan = self._day(package, day)
        row = self._resources.find_hotel(hotel_name)
        if row is None:
            raise ResourceNotFoundError("hotel", hotel_name)
        plan.hotel = hotel_choice(row)
        return self._done(package, plan, "replace_hotel", f"Hotel set to {row.name}")

    def replace_transport(self, package: ItineraryPackage, day: int, label: str) -> MutationResult:
        plan = self._day(package, day)
        row = self._resources.find_transport(label)
        if row is None:
            raise ResourceNotFoundError("transport", label)
        plan.transport = transport_choice(row)
        return self._done(package, plan, "replace_transport", f"Transport set to {row.label}")

    def toggle_attraction(self, package: ItineraryPackage, day: int, name: str) -> MutationResult:
        plan = self._day(package, day)

        remaining = [a for a in plan.attractions if a.name != name]
        if len(remaining) != len(plan.attractions):
            plan.attractions = remaining
            return self._done(package, plan, "remove_attraction", f"Removed {name}")

        row = self._resources.find_attraction(name)
        if row is None:
            raise ResourceNotFoundError("attraction", name)

        entry = entry_from_row(row)
        if self.would_exceed_cap(plan, entry.duration):
            hours = self.day_hours(plan)
            message = (
                f"Adding {row.name} would exceed the {self._hours_cap:g}-hour daily limit "
                f"({hours:g}h already planned)"
            )
            logger.info("Day %d add rejected: %s", plan.day, message)
            return MutationResult(False, "add_attraction", plan.day, message, hours)

        plan.attractions = plan.attractions + [entry]
        return self._done(package, plan, "add_attraction", f"Added {row.name}")

    def update_day(
        self,
        package: ItineraryPackage,
        day: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> MutationResult:
        plan = self._day(package, day)
        if title is not None:
            plan.title = title
        if description is not None:
            plan.description = description
        return self._done(package, plan, "update_day", "Day details updated")
