"""Reference data endpoints.

Endpoints:
  - /master/gates
  - /master/zones[?gateId=]
  - /master/categories

All three answer from canned datasets while degraded.
"""

from __future__ import annotations

from urllib.parse import urlencode

from pyparking import _fallback_data
from pyparking._api._common import decode_result
from pyparking.fallback import OfflineFallbackPolicy
from pyparking.models.master import Category, Gate, Zone
from pyparking.result import Result

GATES_ENDPOINT = "/master/gates"
ZONES_ENDPOINT = "/master/zones"
CATEGORIES_ENDPOINT = "/master/categories"


async def fetch_gates(policy: OfflineFallbackPolicy) -> Result[list[Gate]]:
    result = await policy.request_with_fallback(GATES_ENDPOINT, fallback=_fallback_data.GATES)
    return decode_result(GATES_ENDPOINT, result, list[Gate])


async def fetch_zones(policy: OfflineFallbackPolicy, gate_id: str | None = None) -> Result[list[Zone]]:
    endpoint = ZONES_ENDPOINT
    if gate_id:
        endpoint = f"{ZONES_ENDPOINT}?{urlencode({'gateId': gate_id})}"
    result = await policy.request_with_fallback(
        endpoint,
        fallback=lambda: _fallback_data.zones_for_gate(gate_id),
    )
    return decode_result(endpoint, result, list[Zone])


async def fetch_categories(policy: OfflineFallbackPolicy) -> Result[list[Category]]:
    result = await policy.request_with_fallback(CATEGORIES_ENDPOINT, fallback=_fallback_data.CATEGORIES)
    return decode_result(CATEGORIES_ENDPOINT, result, list[Category])
