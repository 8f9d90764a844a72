"""Ticket and subscription lookups.

Endpoints:
  - /tickets/checkin
  - /tickets/checkout
  - /tickets/{id}
  - /subscriptions/{id}

None of these has an offline answer; errors always propagate.
"""

from __future__ import annotations

from urllib.parse import quote

from pyparking._api._common import decode_result
from pyparking.fallback import OfflineFallbackPolicy
from pyparking.models.subscription import Subscription
from pyparking.models.ticket import CheckinRequest, CheckinResult, CheckoutReceipt, CheckoutRequest, Ticket
from pyparking.result import Result

CHECKIN_ENDPOINT = "/tickets/checkin"
CHECKOUT_ENDPOINT = "/tickets/checkout"


async def checkin(policy: OfflineFallbackPolicy, request: CheckinRequest) -> Result[CheckinResult]:
    result = await policy.request(CHECKIN_ENDPOINT, "POST", request.to_payload())
    return decode_result(CHECKIN_ENDPOINT, result, CheckinResult)


async def checkout(policy: OfflineFallbackPolicy, request: CheckoutRequest) -> Result[CheckoutReceipt]:
    result = await policy.request(CHECKOUT_ENDPOINT, "POST", request.to_payload())
    return decode_result(CHECKOUT_ENDPOINT, result, CheckoutReceipt)


async def fetch_ticket(policy: OfflineFallbackPolicy, ticket_id: str) -> Result[Ticket]:
    endpoint = f"/tickets/{quote(ticket_id, safe='')}"
    result = await policy.request(endpoint)
    return decode_result(endpoint, result, Ticket)


async def fetch_subscription(policy: OfflineFallbackPolicy, subscription_id: str) -> Result[Subscription]:
    endpoint = f"/subscriptions/{quote(subscription_id, safe='')}"
    result = await policy.request(endpoint)
    return decode_result(endpoint, result, Subscription)
