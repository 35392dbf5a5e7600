#!/usr/bin/env python3
"""
Interactive local booking harness.

Usage:
  python3 scripts/book_local.py
  python3 scripts/book_local.py --api-url http://127.0.0.1:8000

What it does:
- Walks through the customer booking wizard in the terminal
- Uses the in-process use cases (demo data) unless --api-url is given
- Prints load/submission failures and lets you retry or go back
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from slotbook.application.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from slotbook.application.use_cases.booking_wizard import BookingWizard
from slotbook.application.utils.state_helpers import staff_for_selected_service
from slotbook.application.utils.time_parser import format_12h, parse_time_label
from slotbook.core.config import settings
from slotbook.core.logging_config import configure_logging
from slotbook.domain.entities.booking_draft import WizardStep
from slotbook.domain.entities.wizard_state import WizardState


def _print_header() -> None:
    print("\nLocal Booking Harness")
    print("-" * 60)
    print("Pick options by number. Commands: b (back), q (quit)")
    print("-" * 60)


def _choose(prompt: str, options: list[tuple[str, str]]) -> str | None:
    """Returns the chosen id, "b" for back, or None to quit."""
    for n, (_, label) in enumerate(options, start=1):
        print(f"  {n}. {label}")
    while True:
        raw = input(f"{prompt}> ").strip().lower()
        if raw == "q":
            return None
        if raw == "b":
            return "b"
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1][0]
        print("  Please pick a number from the list.")


def _print_failure(state: WizardState) -> None:
    failure = state.load_error or state.error
    if failure:
        print(f"  ! {failure.message} ({failure.kind})")


async def _step_business(wizard: BookingWizard) -> bool:
    state = wizard.state
    if state.load_error and state.draft.business_id:
        _print_failure(state)
        if input("Retry loading? [Y/n]> ").strip().lower() in ("", "y", "yes"):
            await wizard.retry_catalog()
            return True

    options = [(b.id, f"{b.name} ({b.category.value})" + (f" - {b.address}" if b.address else "")) for b in state.businesses]
    if not options:
        print("  No businesses available.")
        return False
    print("\nChoose a business:")
    choice = _choose("business", options)
    if choice is None:
        return False
    if choice == "b":
        print("  Already on the first step.")
        return True
    await wizard.select_business(choice)
    _print_failure(wizard.state)
    return True


async def _step_service(wizard: BookingWizard) -> str | None:
    catalog = wizard.state.catalog
    options = [(s.id, f"{s.name} - {s.duration_minutes} min - ${s.price:.2f}") for s in catalog.services] if catalog else []
    print("\nSelect a service:")
    return _choose("service", options)


async def _step_staff(wizard: BookingWizard) -> str | None:
    options = [(m.id, f"{m.name} ({', '.join(m.specialties) or 'all services'})") for m in staff_for_selected_service(wizard.state)]
    print("\nChoose a provider:")
    return _choose("provider", options)


async def _step_details(wizard: BookingWizard) -> bool:
    state = wizard.state
    draft = state.draft
    print("\nDate, time and your details (Enter keeps the current value, b goes back, q quits)")

    date = input(f"Date YYYY-MM-DD [{draft.date or ''}]> ").strip()
    if date in ("b", "q"):
        if date == "b":
            await wizard.back()
        return date == "b"
    if date:
        await wizard.edit_details(date=date)
        _print_failure(wizard.state)

    if wizard.state.slots:
        print("  Available times: " + ", ".join(format_12h(parse_time_label(s)) for s in wizard.state.slots))
    elif wizard.state.draft.date:
        print("  No free times on that day.")

    changes: dict[str, str] = {}
    for field, label in (
        ("time", "Time"),
        ("customer_name", "Full name"),
        ("customer_email", "Email"),
        ("customer_phone", "Phone"),
        ("notes", "Notes"),
    ):
        current = getattr(wizard.state.draft, field) or ""
        value = input(f"{label} [{current}]> ").strip()
        if value:
            changes[field] = value
    if changes:
        await wizard.edit_details(**changes)

    try:
        state = await wizard.submit()
    except ValidationError as e:
        print(f"  ! Please fill in: {', '.join(e.fields)}")
        return True

    if state.error:
        _print_failure(state)
    return True


def _print_confirmation(state: WizardState) -> None:
    view = state.appointment
    if view is None:
        return
    appt = view.appointment
    print("\nAppointment booked!")
    print("-" * 60)
    print(f"Service:  {view.service.name if view.service else '-'}")
    print(f"Provider: {view.staff.name if view.staff else '-'}")
    print(f"Date:     {appt.date.isoformat()}")
    print(f"Time:     {format_12h(appt.start_time)} - {format_12h(appt.end_time)}")
    print(f"Status:   {appt.status.value}")
    print(f"A confirmation goes to {view.customer.email}")
    print("-" * 60)


async def run(wizard: BookingWizard) -> None:
    _print_header()
    await wizard.start()
    _print_failure(wizard.state)

    while True:
        state = wizard.state
        try:
            if state.step == WizardStep.SELECT_BUSINESS:
                if not await _step_business(wizard):
                    return
            elif state.step == WizardStep.SELECT_SERVICE:
                choice = await _step_service(wizard)
                if choice is None:
                    return
                await (wizard.back() if choice == "b" else wizard.select_service(choice))
            elif state.step == WizardStep.SELECT_STAFF:
                choice = await _step_staff(wizard)
                if choice is None:
                    return
                await (wizard.back() if choice == "b" else wizard.select_staff(choice))
            elif state.step == WizardStep.DETAILS:
                if not await _step_details(wizard):
                    return
            else:
                _print_confirmation(state)
                await wizard.leave()
                return
        except (InvalidTransitionError, NotFoundError, ValidationError) as e:
            print(f"  ! {e}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Book an appointment from the terminal.")
    parser.add_argument("--api-url", default=None, help="Base URL of a running slotbook API")
    args = parser.parse_args()

    if args.api_url:
        settings.BOOKING_API_BASE_URL = args.api_url
    configure_logging("WARNING")

    from slotbook.wiring.dependencies import make_booking_wizard

    try:
        asyncio.run(run(make_booking_wizard()))
    except (KeyboardInterrupt, EOFError):
        print("\nBye.")


if __name__ == "__main__":
    main()
