"""
Offline console demo: edits a partner schedule and walks bookings through
their lifecycle without any network calls.

Uses the real interval set, capacity model, editing session and booking
state machine against the in-memory services.

Usage:
    python main.py
    python main.py --scenario schedule
    python main.py --scenario bookings --partner partner-7
"""

import argparse
import asyncio
from datetime import date, datetime, timedelta
from typing import Optional

from partner_schedule.booking.actions import (
    available_actions_by_booking,
    cancel_booking,
    complete_service,
    load_bookings,
    reschedule_booking,
    start_service,
)
from partner_schedule.config import settings
from partner_schedule.errors import IllegalTransitionError, ScheduleError
from partner_schedule.schemas.availability_schema import WeeklyAvailability
from partner_schedule.schemas.booking_schema import (
    Booking,
    BookingSlot,
    CustomerInfo,
    ServiceInfo,
    VehicleInfo,
)
from partner_schedule.schemas.capacity_schema import ServiceCategory
from partner_schedule.schedule.availability import EditOp, get_day
from partner_schedule.schedule.edit_session import ScheduleEditSession
from partner_schedule.schedule.intervals import make_block
from partner_schedule.tools import bookings as booking_service
from partner_schedule.utils import day_of_week, format_time_display, parse_time, slot_end_time

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleDemo:
    """Runs scripted schedule and booking scenarios in the terminal."""

    def __init__(self, partner_id: str) -> None:
        self.partner_id = partner_id
        self.now = datetime.now().replace(second=0, microsecond=0)

    def say(self, text: str) -> None:
        print(f"{GREEN}{text}{RESET}")

    def warn(self, text: str) -> None:
        print(f"{RED}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.app_name.upper()} - {title}{RESET}")
        print(f"{BOLD}  Partner: {self.partner_id}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def show_week(self, availability: WeeklyAvailability) -> None:
        for day in availability.days:
            blocks = ", ".join(
                f"{format_time_display(b.start)}-{format_time_display(b.end)}" for b in day.blocks
            ) or "-"
            state = "on " if day.is_enabled else f"{YELLOW}off{RESET}"
            print(f"  {day.day_name:<10} {state}  {blocks}")

    # ------------------------------------------------------------------ #
    # Schedule scenario
    # ------------------------------------------------------------------ #

    async def run_schedule(self) -> ScheduleEditSession:
        self.banner("Schedule editing")
        session = await ScheduleEditSession.load(self.partner_id)
        self.show_week(session.availability)
        self.system_log(f"Unsaved changes: {session.has_unsaved_changes}")

        self.say("\nOpen Sunday 10:00-14:00 by dragging, then add an evening block on Monday.")
        session.set_day_enabled(0, True)
        session.apply_drag(0, 10 / 24, 14 / 24, remove_mode=False)
        session.edit_day_blocks(1, EditOp.INSERT, make_block("18:00", "20:00"))

        self.say("Take a lunch break out of Tuesday.")
        session.edit_day_blocks(2, EditOp.REMOVE, make_block("12:00", "13:00"))

        try:
            session.edit_day_blocks(3, EditOp.INSERT, make_block("15:00", "15:00"))
        except ScheduleError as exc:
            self.warn(f"Rejected: {exc}")

        session.set_capacity(ServiceCategory.WASH, 4)
        session.set_buffer_time(20)
        self.show_week(session.availability)
        self.system_log(
            f"Active days: {session.active_days}, bays: {session.total_bays}, "
            f"buffer: {session.capacity.buffer_time_minutes} min"
        )
        self.system_log(f"Unsaved changes: {session.has_unsaved_changes}")

        await session.save()
        self.say("Settings saved.")
        self.system_log(f"Unsaved changes: {session.has_unsaved_changes}")
        return session

    # ------------------------------------------------------------------ #
    # Booking scenario
    # ------------------------------------------------------------------ #

    def _seed_bookings(self) -> None:
        today = self.now.date()
        samples = [
            ("bk-1", today + timedelta(days=1), "09:00", 45, "Express Wash"),
            ("bk-2", today + timedelta(days=1), "10:00", 90, "Full Detail"),
            ("bk-3", today - timedelta(days=1), "09:00", 30, "Basic Wash"),
        ]
        for booking_id, day, start, duration, name in samples:
            booking_service.add_booking(
                Booking(
                    id=booking_id,
                    partner_id=self.partner_id,
                    slot=BookingSlot(date=day, start_time=start, end_time=slot_end_time(start, duration)),
                    service=ServiceInfo(id=f"svc-{booking_id}", name=name, duration_minutes=duration),
                    customer=CustomerInfo(id="cust-1", name="John Smith", phone="0412345678"),
                    vehicle=VehicleInfo(make="Toyota", model="Corolla", plate_number="ABC123"),
                )
            )

    async def run_bookings(self, availability: WeeklyAvailability) -> None:
        self.banner("Booking lifecycle")
        self._seed_bookings()
        today = self.now.date()
        bookings = await load_bookings(self.partner_id, today - timedelta(days=1), today + timedelta(days=7))

        actions = available_actions_by_booking(bookings, self.now)
        for booking in bookings:
            enabled = ", ".join(a.value for a in actions[booking.id]) or "none"
            print(
                f"  {booking.booking_number}  {booking.slot.date} {booking.slot.start_time}-"
                f"{booking.slot.end_time}  {booking.status.value:<11} actions: {enabled}"
            )

        by_id = {b.id: b for b in bookings}

        try:
            started = await start_service(by_id["bk-1"], now=self.now)
            self.say(f"\nStarted {started.booking_number}: {started.status.value}")
            finished = await complete_service(started, now=self.now)
            self.say(f"Completed {finished.booking_number}: {finished.status.value}")
        except IllegalTransitionError as exc:
            self.warn(f"Rejected: {exc}")

        try:
            await start_service(by_id["bk-3"], now=self.now)
        except IllegalTransitionError as exc:
            self.warn(f"Rejected: {exc}")

        target = self._next_open_slot(availability, by_id["bk-2"].service.duration_minutes)
        if target is not None:
            moved = await reschedule_booking(by_id["bk-2"], target, availability, now=self.now)
            self.say(f"Rescheduled {moved.booking_number} to {moved.slot.date} {moved.slot.start_time}")
            cancelled = await cancel_booking(moved, "Customer requested", now=self.now)
            self.say(f"Cancelled {cancelled.booking_number}: {cancelled.cancellation_reason}")
            try:
                await cancel_booking(cancelled, "again", now=self.now)
            except IllegalTransitionError as exc:
                self.warn(f"Rejected: {exc}")

    def _next_open_slot(self, availability: WeeklyAvailability, duration: int) -> Optional[BookingSlot]:
        """First open block start on a later day that fits ``duration``."""
        for offset in range(2, availability.max_advance_booking_days + 1):
            day: date = self.now.date() + timedelta(days=offset)
            entry = get_day(availability, day_of_week(day))
            if not entry.is_enabled:
                continue
            for block in entry.blocks:
                if parse_time(block.start) + duration <= parse_time(block.end):
                    end = slot_end_time(block.start, duration)
                    return BookingSlot(date=day, start_time=block.start, end_time=end)
        return None


async def _run(scenario: str, partner_id: str) -> None:
    demo = ConsoleDemo(partner_id)
    session = await demo.run_schedule() if scenario in ("schedule", "all") else None
    if scenario in ("bookings", "all"):
        if session is None:
            session = await ScheduleEditSession.load(partner_id)
        await demo.run_bookings(session.availability)
    print(f"\n{BOLD}{'=' * 60}{RESET}")
    print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
    print(f"{BOLD}{'=' * 60}{RESET}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline partner schedule demo")
    parser.add_argument(
        "--scenario",
        choices=["schedule", "bookings", "all"],
        default="all",
        help="Which scripted scenario to play",
    )
    parser.add_argument("--partner", default="demo-partner-1", help="Partner id to use")
    args = parser.parse_args()
    asyncio.run(_run(args.scenario, args.partner))


if __name__ == "__main__":
    main()
