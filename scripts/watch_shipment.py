#!/usr/bin/env python3
"""Watch a shipment live from the terminal.

Mounts a tracking view against the API and prints status, position,
staleness and the milestone timeline every time a snapshot arrives.

Usage
-----
Set environment variables and run::

    export SHIPTRACK_BASE_URL="http://localhost:8000"
    export SHIPTRACK_API_TOKEN="..."
    python scripts/watch_shipment.py 42

Options::

    --tracking-number    Treat the argument as a public tracking number
    --interval SECONDS   Refresh interval (default: from environment, 30)
    --always             Poll regardless of status (default: only in transit)
    --verbose, -v        Debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyshiptrack import (  # noqa: E402
    ShipTrackError,
    TrackingClient,
    TrackingConfig,
    TrackingSnapshot,
    TrackingView,
    format_time_ago,
)
from pyshiptrack.display import format_eta, format_speed, short_address  # noqa: E402
from pyshiptrack.view import CUSTOMER_STATUSES  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _print_snapshot(view: TrackingView, snapshot: TrackingSnapshot) -> None:
    route_view = view.route_view
    print(_section(f"{snapshot.tracking_number or snapshot.shipment_id}  [{route_view.badge}]"))
    print(f"  Progress:  {route_view.style.progress}%")
    print(f"  ETA:       {format_eta(snapshot)}")
    if snapshot.origin is not None and snapshot.destination is not None:
        print(f"  Route:     {short_address(snapshot.origin.address)} -> {short_address(snapshot.destination.address)}")
    else:
        print("  Route:     insufficient data")

    position = view.position
    if position is None:
        print("  Position:  not yet available")
    else:
        age = format_time_ago(position.timestamp, datetime.now(UTC)) or "unknown age"
        speed = format_speed(position.speed) or "-"
        print(f"  Position:  {position.position.lat:.6f}, {position.position.lng:.6f} ({position.source}, {age}, {speed})")

    for step in view.timeline:
        stamp = step.timestamp.isoformat() if step.timestamp else ""
        print(f"  {step.indicator} {step.label:<11} {stamp}")


async def run() -> None:
    parser = argparse.ArgumentParser(description="Watch a shipment's live tracking data")
    parser.add_argument("shipment", help="Shipment id (or tracking number with --tracking-number)")
    parser.add_argument("--tracking-number", action="store_true", help="Resolve a public tracking number first")
    parser.add_argument("--interval", type=float, help="Refresh interval in seconds")
    parser.add_argument("--always", action="store_true", help="Poll regardless of shipment status")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {"refresh_interval": args.interval} if args.interval else {}
    cfg = TrackingConfig.from_env(**overrides)

    async with TrackingClient(cfg) as client:
        shipment_id = args.shipment
        if args.tracking_number:
            shipment_id = (await client.track(args.shipment)).shipment_id

        view: TrackingView

        def on_snapshot(snapshot: TrackingSnapshot) -> None:
            _print_snapshot(view, snapshot)

        def on_error(exc: Exception) -> None:
            print(f"  Refresh failed: {exc} (last update {view.staleness_label})")

        view = TrackingView(
            client,
            shipment_id,
            config=cfg,
            auto_refresh=True if args.always else None,
            active_statuses=CUSTOMER_STATUSES,
            on_snapshot=on_snapshot,
            on_error=on_error,
        )
        async with view:
            if view.snapshot is None:
                return
            print(f"\nWatching every {cfg.refresh_interval:.0f}s. Ctrl+C to quit.")
            await asyncio.Event().wait()


def main() -> None:
    try:
        asyncio.run(run())
    except ShipTrackError as exc:
        print(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nDone.")


if __name__ == "__main__":
    main()
