"""Canned datasets served while the client is degraded.

Values are plain API-shaped dicts (camelCase keys) so they flow through
the same model parsing as live responses.
"""

from __future__ import annotations

from typing import Any

GATES: list[dict[str, Any]] = [
    {"id": "gate-1", "name": "Main Gate", "zoneIds": ["zone-1", "zone-2"], "location": "Building A"},
    {"id": "gate-2", "name": "Side Gate", "zoneIds": ["zone-3"], "location": "Building B"},
]

ZONES: list[dict[str, Any]] = [
    {
        "id": "zone-1",
        "name": "VIP Parking",
        "categoryId": "cat-1",
        "gateIds": ["gate-1"],
        "totalSlots": 50,
        "occupied": 32,
        "free": 18,
        "reserved": 5,
        "availableForVisitors": 13,
        "availableForSubscribers": 18,
        "rateNormal": 25,
        "rateSpecial": 40,
        "open": True,
    },
    {
        "id": "zone-2",
        "name": "Regular Parking",
        "categoryId": "cat-2",
        "gateIds": ["gate-1"],
        "totalSlots": 100,
        "occupied": 67,
        "free": 33,
        "reserved": 8,
        "availableForVisitors": 25,
        "availableForSubscribers": 33,
        "rateNormal": 15,
        "rateSpecial": 25,
        "open": True,
    },
    {
        "id": "zone-3",
        "name": "Economy Parking",
        "categoryId": "cat-3",
        "gateIds": ["gate-2"],
        "totalSlots": 80,
        "occupied": 45,
        "free": 35,
        "reserved": 6,
        "availableForVisitors": 29,
        "availableForSubscribers": 35,
        "rateNormal": 10,
        "rateSpecial": 18,
        "open": False,
    },
]

CATEGORIES: list[dict[str, Any]] = [
    {"id": "cat-1", "name": "VIP", "description": "Premium parking spaces", "rateNormal": 25, "rateSpecial": 40},
    {"id": "cat-2", "name": "Regular", "description": "Standard parking spaces", "rateNormal": 15, "rateSpecial": 25},
    {"id": "cat-3", "name": "Economy", "description": "Budget parking spaces", "rateNormal": 10, "rateSpecial": 18},
]

PARKING_STATE: list[dict[str, Any]] = [
    {
        "zoneId": "zone-1",
        "name": "VIP Parking",
        "totalSlots": 50,
        "occupied": 32,
        "free": 18,
        "reserved": 5,
        "availableForVisitors": 13,
        "availableForSubscribers": 18,
        "subscriberCount": 12,
        "open": True,
    },
    {
        "zoneId": "zone-2",
        "name": "Regular Parking",
        "totalSlots": 100,
        "occupied": 67,
        "free": 33,
        "reserved": 8,
        "availableForVisitors": 25,
        "availableForSubscribers": 33,
        "subscriberCount": 25,
        "open": True,
    },
    {
        "zoneId": "zone-3",
        "name": "Economy Parking",
        "totalSlots": 80,
        "occupied": 45,
        "free": 35,
        "reserved": 6,
        "availableForVisitors": 29,
        "availableForSubscribers": 35,
        "subscriberCount": 18,
        "open": False,
    },
]

SUBSCRIPTIONS: list[dict[str, Any]] = [
    {
        "id": "sub-1",
        "userId": "user-1",
        "category": "cat-1",
        "active": True,
        "startDate": "2024-01-01",
        "endDate": "2024-12-31",
        "currentCheckins": [],
    },
    {
        "id": "sub-2",
        "userId": "user-2",
        "category": "cat-2",
        "active": True,
        "startDate": "2024-01-01",
        "endDate": "2024-12-31",
        "currentCheckins": [{"ticketId": "t_123", "zoneId": "zone-2", "checkinAt": "2024-01-15T10:00:00Z"}],
    },
]

# Fixed accounts accepted by offline login: (username, password, role, id).
DEMO_ACCOUNTS: tuple[tuple[str, str, str, str], ...] = (
    ("admin", "admin", "admin", "admin-1"),
    ("employee", "employee", "employee", "emp-1"),
    ("RedaSalem", "012345678", "admin", "reda-1"),
)


def zones_for_gate(gate_id: str | None) -> list[dict[str, Any]]:
    """Canned zones, filtered to *gate_id* when given."""
    if not gate_id:
        return ZONES
    return [zone for zone in ZONES if gate_id in zone["gateIds"]]
