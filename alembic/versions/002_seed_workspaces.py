"""Seed workspaces and café menu.

Revision ID: 002_seed_workspaces
Revises: 001_initial
Create Date: 2025-09-29

Seeds the bookable desks and rooms and the starter café menu.
Prices are in cents.
"""

import uuid
from typing import Sequence

from alembic import op
from sqlalchemy import Boolean, Integer, Numeric, String, column, table
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID

# revision identifiers
revision: str = "002_seed_workspaces"
down_revision: str = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

WORKSPACES = [
    # ===== DESKS =====
    {
        "name": "Hot Desk - Main Floor",
        "type": "hot-desk",
        "resource_category": "desk",
        "description": "Any available desk in the coworking zone with power, WiFi, and ergonomic seating",
        "capacity": 1,
        "base_price_hourly": 250,
        "min_duration": "1.0",
        "max_duration": "12.0",
        "amenities": ["High-speed WiFi", "Power outlets", "Ergonomic chair", "Natural lighting"],
        "floor_location": "Main Floor",
    },
    {
        "name": "Hot Desk - Quiet Zone",
        "type": "hot-desk",
        "resource_category": "desk",
        "description": "Dedicated quiet area for focused work with noise-reduction",
        "capacity": 1,
        "base_price_hourly": 250,
        "min_duration": "1.0",
        "max_duration": "12.0",
        "amenities": ["High-speed WiFi", "Power outlets", "Quiet zone"],
        "floor_location": "Second Floor",
    },
    # ===== MEETING ROOMS =====
    {
        "name": "Focus Room A",
        "type": "focus-room",
        "resource_category": "meeting-room",
        "description": "Private meeting room for 2-4 people with whiteboard and video conferencing",
        "capacity": 4,
        "base_price_hourly": 2500,
        "min_duration": "0.5",
        "max_duration": "8.0",
        "amenities": ["Whiteboard", "Video conferencing", "65-inch display"],
        "floor_location": "Main Floor",
    },
    {
        "name": "Collaborate Room",
        "type": "collaborate-room",
        "resource_category": "meeting-room",
        "description": "Meeting room with AV equipment for 4-6 people",
        "capacity": 6,
        "base_price_hourly": 4000,
        "min_duration": "0.5",
        "max_duration": "8.0",
        "amenities": ["75-inch display", "Wireless presentation", "Conference phone"],
        "floor_location": "Main Floor",
    },
    {
        "name": "Boardroom",
        "type": "boardroom",
        "resource_category": "meeting-room",
        "description": "Executive meeting space for 6-8 people with full AV suite",
        "capacity": 8,
        "base_price_hourly": 6000,
        "min_duration": "0.5",
        "max_duration": "8.0",
        "amenities": ["85-inch display", "Premium AV system", "Espresso machine"],
        "floor_location": "Second Floor",
    },
    {
        "name": "Communications Pod 1",
        "type": "communications-pod",
        "resource_category": "meeting-room",
        "description": "Private phone booth for calls and video meetings",
        "capacity": 1,
        "base_price_hourly": 500,
        "min_duration": "0.5",
        "max_duration": "4.0",
        "amenities": ["Acoustic treatment", "Power outlets"],
        "floor_location": "Main Floor",
    },
]

MENU_ITEMS = [
    {"title": "House Blend", "category": "coffee", "price": 350, "featured": False, "dietary_tags": []},
    {"title": "Single-Origin Pour Over", "category": "coffee", "price": 450, "featured": True, "dietary_tags": []},
    {"title": "Espresso", "category": "coffee", "price": 300, "featured": False, "dietary_tags": []},
    {"title": "English Breakfast Tea", "category": "tea", "price": 300, "featured": False, "dietary_tags": ["vegan"]},
    {"title": "Butter Croissant", "category": "pastries", "price": 400, "featured": False, "dietary_tags": ["vegetarian"]},
]


def upgrade() -> None:
    """Insert seed workspaces and menu items."""
    workspaces_table = table(
        "workspaces",
        column("id", UUID(as_uuid=True)),
        column("name", String),
        column("type", String),
        column("resource_category", String),
        column("description", String),
        column("capacity", Integer),
        column("base_price_hourly", Integer),
        column("min_duration", Numeric),
        column("max_duration", Numeric),
        column("amenities", JSONB),
        column("available", Boolean),
        column("floor_location", String),
    )
    op.bulk_insert(
        workspaces_table,
        [{"id": uuid.uuid4(), "available": True, **w} for w in WORKSPACES],
    )

    menu_items_table = table(
        "menu_items",
        column("id", UUID(as_uuid=True)),
        column("title", String),
        column("category", String),
        column("price", Integer),
        column("featured", Boolean),
        column("orderable", Boolean),
        column("dietary_tags", ARRAY(String)),
    )
    op.bulk_insert(
        menu_items_table,
        [{"id": uuid.uuid4(), "orderable": True, **m} for m in MENU_ITEMS],
    )


def downgrade() -> None:
    """Remove seed workspaces and menu items."""
    menu_items_table = table("menu_items", column("title", String))
    op.execute(
        menu_items_table.delete().where(
            menu_items_table.c.title.in_([m["title"] for m in MENU_ITEMS])
        )
    )

    workspaces_table = table("workspaces", column("name", String))
    op.execute(
        workspaces_table.delete().where(
            workspaces_table.c.name.in_([w["name"] for w in WORKSPACES])
        )
    )
