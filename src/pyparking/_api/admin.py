"""Admin endpoints.

Endpoints:
  - /admin/reports/parking-state
  - /admin/categories/{id}
  - /admin/zones/{id}/open
  - /admin/rush-hours
  - /admin/vacations
  - /admin/subscriptions

The two reports fall back to canned data while degraded. The four
mutations are simulated locally while degraded and never reach the
network: each echoes the requested change back.
"""

from __future__ import annotations

from urllib.parse import quote

from pyparking import _fallback_data
from pyparking._api._common import decode_result, now_ms
from pyparking.fallback import OfflineFallbackPolicy
from pyparking.models.admin import (
    CategoryRates,
    CategoryUpdate,
    RushHour,
    RushHourRequest,
    Vacation,
    VacationRequest,
    ZoneAction,
    ZoneState,
    ZoneToggle,
)
from pyparking.models.subscription import Subscription
from pyparking.result import Result

PARKING_STATE_ENDPOINT = "/admin/reports/parking-state"
RUSH_HOURS_ENDPOINT = "/admin/rush-hours"
VACATIONS_ENDPOINT = "/admin/vacations"
SUBSCRIPTIONS_ENDPOINT = "/admin/subscriptions"


async def fetch_parking_state(policy: OfflineFallbackPolicy) -> Result[list[ZoneState]]:
    result = await policy.request_with_fallback(PARKING_STATE_ENDPOINT, fallback=_fallback_data.PARKING_STATE)
    return decode_result(PARKING_STATE_ENDPOINT, result, list[ZoneState])


async def fetch_subscriptions(policy: OfflineFallbackPolicy) -> Result[list[Subscription]]:
    result = await policy.request_with_fallback(SUBSCRIPTIONS_ENDPOINT, fallback=_fallback_data.SUBSCRIPTIONS)
    return decode_result(SUBSCRIPTIONS_ENDPOINT, result, list[Subscription])


async def update_category(
    policy: OfflineFallbackPolicy,
    category_id: str,
    update: CategoryUpdate,
) -> Result[CategoryRates]:
    endpoint = f"/admin/categories/{quote(category_id, safe='')}"
    body = update.to_payload()
    result = await policy.simulate_when_degraded(
        endpoint,
        "PUT",
        body,
        lambda: {**body, "id": category_id},
    )
    return decode_result(endpoint, result, CategoryRates)


async def toggle_zone(policy: OfflineFallbackPolicy, zone_id: str, action: ZoneAction) -> Result[ZoneToggle]:
    endpoint = f"/admin/zones/{quote(zone_id, safe='')}/open"
    is_open = action is ZoneAction.OPEN
    result = await policy.simulate_when_degraded(
        endpoint,
        "PUT",
        {"open": is_open},
        lambda: {"zoneId": zone_id, "open": is_open},
    )
    return decode_result(endpoint, result, ZoneToggle)


async def add_rush_hour(policy: OfflineFallbackPolicy, request: RushHourRequest) -> Result[RushHour]:
    body = request.to_payload()
    result = await policy.simulate_when_degraded(
        RUSH_HOURS_ENDPOINT,
        "POST",
        body,
        lambda: {"id": f"rush_{now_ms()}", **body},
    )
    return decode_result(RUSH_HOURS_ENDPOINT, result, RushHour)


async def add_vacation(policy: OfflineFallbackPolicy, request: VacationRequest) -> Result[Vacation]:
    body = request.to_payload()
    result = await policy.simulate_when_degraded(
        VACATIONS_ENDPOINT,
        "POST",
        body,
        lambda: {"id": f"vac_{now_ms()}", **body},
    )
    return decode_result(VACATIONS_ENDPOINT, result, Vacation)
