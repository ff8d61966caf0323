#!/usr/bin/env python3
"""
Generate a day prep preview from the command line.

Usage:
  python scripts/run_preview.py --date 2026-02-06
  python scripts/run_preview.py --calendar-check --simple
"""
import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv

logging.basicConfig(level=logging.WARNING)  # Reduce noise

load_dotenv()
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.agents.gateway import select_agent_gateway
from app.core.config import load_config
from app.history.recorder import HistoryRecorder
from app.services.calendar_check import check_calendar
from app.services.preview import PreviewService
from app.settings.store import ConfigStore
from app.storage.slots import FileSlotStorage


async def run(args: argparse.Namespace) -> int:
    cfg = load_config()
    store = ConfigStore(FileSlotStorage(cfg.config_storage_dir))
    gateway = select_agent_gateway(cfg)

    if args.date:
        try:
            store.update(lambda current: current.model_copy(update={"selected_date": args.date}))
        except ValueError as e:
            print(f"Invalid --date {args.date!r}: {e}")
            return 2

    if args.calendar_check:
        check = await check_calendar(gateway, store.load().selected_date, simple=args.simple)
        print(check.error_message or "Calendar agent answered successfully")
        if args.debug:
            print(check.debug_info)
        return 0 if check.ok else 1

    service = PreviewService(store, gateway, HistoryRecorder())
    result = await service.generate_preview()

    print("=" * 80)
    print(f"DAY PREP PREVIEW: {store.load().selected_date}")
    print("=" * 80)

    if not result.ok:
        print(f"Preview failed: {result.error_message}")
        return 1

    if not result.meetings:
        print("No meetings with external participants.")

    for meeting in result.meetings:
        print(f"\n{meeting.time}  {meeting.title} ({meeting.duration_minutes} min)")
        for person in meeting.external_participants:
            enriched = result.participants.get(person.email)
            sources = ", ".join(enriched.sources()) if enriched else "no enrichment"
            print(f"   - {person.name or person.email} <{person.email}>  [{sources}]")

    print("\nEmail draft:\n")
    print(result.email_content)

    if args.debug:
        print("\nRaw coordinator envelope:\n")
        print(result.debug_info)
    if args.json:
        print(json.dumps(result.model_dump(mode="json", exclude={"debug_info"}), indent=2))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a day prep preview")
    parser.add_argument("--date", help="ISO date (YYYY-MM-DD); stored as the selected date")
    parser.add_argument("--calendar-check", action="store_true", help="Only test the calendar agent")
    parser.add_argument("--simple", action="store_true", help="Use the minimal calendar prompt")
    parser.add_argument("--debug", action="store_true", help="Print the raw agent envelope")
    parser.add_argument("--json", action="store_true", help="Also print the preview as JSON")
    return asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    sys.exit(main())
