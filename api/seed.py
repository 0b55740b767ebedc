"""
Startup seeding (enabled with SEED=true).

Each step is skipped when its table already has rows.
"""

from __future__ import annotations

import logging

from auth import repository as auth_repository
from auth import security
from cameras import repository as camera_repository
from core import config
from manufacturers import repository as manufacturer_repository

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@thorntonpickard.com"

MANUFACTURERS = [
    {
        "name": "Thornton-Pickard",
        "founded": 1888,
        "defunct": 1939,
        "country": "United Kingdom",
        "description": "British camera manufacturer known for quality plate cameras and shutters",
    },
]

CAMERAS = [
    {
        "name": "Ruby Reflex",
        "manufacturer": "Thornton-Pickard",
        "year_introduced": 1909,
        "year_discontinued": 1926,
        "format": "Plate",
        "plate_sizes": ["4x5", "5x7"],
        "lens": "Various",
        "shutter": "Focal Plane",
        "features": ["Reflex viewing", "Tilting back", "Rising front"],
        "description": "Professional reflex camera popular with press photographers",
        "rarity": "Uncommon",
        "estimated_value_min": 500.0,
        "estimated_value_max": 800.0,
    },
    {
        "name": "Imperial Triple Extension",
        "manufacturer": "Thornton-Pickard",
        "year_introduced": 1895,
        "format": "Plate",
        "plate_sizes": ["Half-plate", "Whole-plate"],
        "shutter": "Time Shutter",
        "features": ["Triple extension bellows", "Mahogany construction"],
        "description": "High-quality field camera with extensive movements",
        "rarity": "Rare",
        "estimated_value_min": 300.0,
        "estimated_value_max": 600.0,
    },
]


async def seed_admin_user() -> None:
    if await auth_repository.count_users() > 0:
        logger.info("Users already exist, skipping admin seed.")
        return

    password = config.env_str("ADMIN_PASSWORD", "")
    if not password:
        logger.warning("ADMIN_PASSWORD is not set, skipping admin seed.")
        return

    email = config.env_str("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL)
    await auth_repository.create_user(
        email=email,
        password_hash=security.hash_password(password),
        role=security.Role.ADMIN.value,
    )
    logger.info("Admin user created (%s).", auth_repository.normalize_email(email))


async def seed_manufacturers() -> None:
    if await manufacturer_repository.count_manufacturers() > 0:
        logger.info("Manufacturers already exist, skipping seed.")
        return
    for item in MANUFACTURERS:
        await manufacturer_repository.create_manufacturer(**item)
    logger.info("Seeded %d manufacturers.", len(MANUFACTURERS))


async def seed_cameras() -> None:
    if await camera_repository.count_cameras() > 0:
        logger.info("Cameras already exist, skipping seed.")
        return
    for item in CAMERAS:
        await camera_repository.create_camera(item)
    logger.info("Seeded %d cameras.", len(CAMERAS))


async def seed_database() -> None:
    logger.info("Starting database seeding.")
    await seed_admin_user()
    await seed_manufacturers()
    await seed_cameras()
    logger.info("Database seeding completed.")
