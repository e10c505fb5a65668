"""Step CLI - One-shot step queries against the configured providers.

Usage:
    python -m stepkit.cli today                 # Steps since midnight
    python -m stepkit.cli date 2026-10-01       # One calendar day
    python -m stepkit.cli last 7                # Last 7 days (failed days omitted)
    python -m stepkit.cli week [2026-10-01]     # Week containing the date (default today)
    python -m stepkit.cli month [2026-10-01]    # Month containing the date (default today)
    python -m stepkit.cli year 2025             # Whole year
    python -m stepkit.cli permissions           # Request provider access
"""

import asyncio
import json
import sys
from datetime import date
from typing import Any, List

from stepkit.core.config import settings
from stepkit.core.errors import StepServiceError
from stepkit.core.logging import configure_logging, get_logger
from stepkit.providers import build_providers
from stepkit.services.step_service import StepService, summarize

logger = get_logger("cli")

COMMANDS = ("today", "date", "last", "week", "month", "year", "permissions")


def _series_payload(series) -> dict:
    return {
        "days": {day.date().isoformat(): obs.model_dump(mode="json") for day, obs in sorted(series.items())},
        "summary": summarize(series).model_dump(mode="json"),
    }


async def run_command(service: StepService, command: str, args: List[str]) -> Any:
    """Run one command and return a JSON-serialisable result."""
    if command == "today":
        return (await service.fetch_today_steps()).model_dump(mode="json")
    if command == "date":
        return (await service.fetch_steps_for_date(date.fromisoformat(args[0]))).model_dump(mode="json")
    if command == "last":
        return _series_payload(await service.fetch_last_n_days(int(args[0])))
    if command == "week":
        target = date.fromisoformat(args[0]) if args else service.calendar.now()
        return _series_payload(await service.fetch_weekly_steps(target))
    if command == "month":
        target = date.fromisoformat(args[0]) if args else service.calendar.now()
        return _series_payload(await service.fetch_monthly_steps(target))
    if command == "year":
        return _series_payload(await service.fetch_yearly_steps(int(args[0])))
    if command == "permissions":
        return await service.request_permissions()
    raise ValueError(f"Unsupported command: {command}")


def main(argv: List[str] | None = None) -> int:
    """Main entry point for the step CLI."""
    configure_logging()
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS:
        logger.error(f"Invalid command. Must be one of: {', '.join(COMMANDS)}")
        return 2

    command, args = argv[0], argv[1:]
    historical, recent = build_providers(settings)
    service = StepService(historical, recent, config=settings.service_config())

    try:
        result = asyncio.run(run_command(service, command, args))
    except (IndexError, ValueError) as exc:
        logger.error(f"Invalid arguments for {command}: {exc}")
        return 2
    except StepServiceError as exc:
        logger.error(f"{command} failed: [{exc.code}] {exc.message}")
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
