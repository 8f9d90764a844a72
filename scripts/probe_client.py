#!/usr/bin/env python3
"""Live smoke check for a parking-operations backend.

Runs a short session against the configured service and reports which
calls were answered by the network and which fell back to offline data.

Configuration comes from the environment (see ``ParkingConfig.from_env``):
- PARKING_BASE_URL, PARKING_WS_URL
- PARKING_ENV (anything other than ``production`` allows offline mode)
- PARKING_STORAGE_PATH (optional token/account file)

Credentials default to the ``admin`` demo account.

Default behavior:
1) login,
2) list gates, zones and categories,
3) fetch the parking-state report,
4) optionally watch the realtime channel for ``--watch`` seconds.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyparking import ParkingClient, ParkingConfig, Result  # noqa: E402

_LOG = logging.getLogger("probe_client")


@dataclass(frozen=True)
class CheckResult:
    name: str
    ok: bool
    detail: str


def _check(name: str, result: Result[Any], degraded: bool) -> CheckResult:
    if result.is_error:
        return CheckResult(name=name, ok=False, detail=f"{result.error_kind}: {result.message}")
    source = "offline" if degraded else "network"
    size = len(result.data) if isinstance(result.data, list) else 1
    return CheckResult(name=name, ok=True, detail=f"{size} item(s) from {source}")


def _print_results(results: list[CheckResult]) -> None:
    width = max((len(result.name) for result in results), default=10)
    print("\nProbe report")
    print("-" * (width + 24))
    for result in results:
        status = "OK" if result.ok else "FAIL"
        print(f"{result.name:<{width}}  {status:<4}  {result.detail}")
    failures = [result for result in results if not result.ok]
    print("-" * (width + 24))
    print(f"Summary: {len(results) - len(failures)} OK, {len(failures)} FAIL")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run live parking backend smoke checks")
    parser.add_argument("--username", default="admin", help="Login username.")
    parser.add_argument("--password", default="admin", help="Login password.")
    parser.add_argument(
        "--gate",
        default=None,
        help="Gate id used to filter zones and to subscribe on the realtime channel.",
    )
    parser.add_argument(
        "--watch",
        type=float,
        default=0.0,
        help="Seconds to listen on the realtime channel (0 = skip).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Pretty-print realtime messages as JSON.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


async def _watch(client: ParkingClient, gate_id: str | None, seconds: float, pretty: bool) -> CheckResult:
    received: list[Any] = []

    def on_message(message: Any) -> None:
        received.append(message)
        if pretty:
            print(json.dumps(message, indent=2, ensure_ascii=False, sort_keys=True))
        else:
            print(f"realtime: {message}")

    def on_error(error: Exception) -> None:
        _LOG.warning("Realtime error: %s", error)

    channel = client.realtime_channel()
    await channel.connect(on_message=on_message, on_error=on_error)
    if gate_id:
        await channel.subscribe(gate_id)
    try:
        await asyncio.sleep(seconds)
    finally:
        state = channel.state
        await channel.disconnect()

    ok = not channel.is_offline
    return CheckResult(name="realtime", ok=ok, detail=f"state={state} messages={len(received)}")


async def _run(args: argparse.Namespace) -> int:
    config = ParkingConfig.from_env()
    results: list[CheckResult] = []

    async with ParkingClient(config) as client:
        login = await client.login(args.username, args.password)
        results.append(_check("login", login, client.degraded))

        results.append(_check("gates", await client.get_gates(), client.degraded))
        results.append(_check("zones", await client.get_zones(args.gate), client.degraded))
        results.append(_check("categories", await client.get_categories(), client.degraded))
        results.append(_check("parking_state", await client.get_parking_state(), client.degraded))

        if args.watch > 0:
            results.append(await _watch(client, args.gate, args.watch, args.json))

        if client.degraded:
            print("Backend unreachable: answers came from offline data.")

    _print_results(results)
    return 0 if all(result.ok for result in results) else 1


def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
