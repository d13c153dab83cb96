#!/usr/bin/env python3
"""Seed the database with demo artisans and certified products.

Usage:
    python -m scripts.seed_marketplace
    # or from project root:
    python scripts/seed_marketplace.py
"""

import asyncio
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from ophelia_market.common.config import get_settings
from ophelia_market.deps import build_services

ARTISAN_SEEDS = [
    {
        "email": "amara@example.com",
        "full_name": "Amara Okafor",
        "country": "Nigeria",
        "craft_type": "Textile Weaving",
        "products": [
            {
                "title": "Aso-Oke Ceremonial Shawl",
                "description": "Hand-loomed strip weave in indigo and gold, finished with knotted fringe.",
                "price": 145.0,
                "category": "Textiles",
                "materials": "cotton, silk",
                "stock_quantity": 4,
            },
        ],
    },
    {
        "email": "tomas@example.com",
        "full_name": "Tomás Herrera",
        "country": "Mexico",
        "craft_type": "Pottery",
        "products": [
            {
                "title": "Barro Negro Water Jug",
                "description": "Burnished black clay jug from Oaxaca, smoke-fired in an open pit kiln.",
                "price": 89.0,
                "category": "Pottery",
                "materials": "black clay",
                "stock_quantity": 6,
            },
            {
                "title": "Talavera Serving Bowl",
                "description": "Tin-glazed earthenware bowl painted by hand with cobalt floral motifs.",
                "price": 62.5,
                "category": "Pottery",
                "materials": "earthenware, tin glaze",
                "stock_quantity": 10,
            },
        ],
    },
]


async def seed_marketplace() -> None:
    services = build_services(get_settings())
    await services.startup()

    for seed in ARTISAN_SEEDS:
        async with services.db.get_session() as session:
            if await services.profiles.find_profile_by_email(session, seed["email"]):
                print(f"  [skip] {seed['email']} already exists")
                continue

            profile = await services.profiles.create_profile(
                session, seed["email"], full_name=seed["full_name"], country=seed["country"],
            )
            artisan = await services.profiles.setup_artisan(
                session, profile.id, seed["craft_type"],
            )
            user_id = profile.id
            artisan_id = artisan.id
        print(f"  [created] {seed['full_name']} ({seed['craft_type']})")

        for product in seed["products"]:
            outcome = await services.issuance.issue(
                product, artisan_id=artisan_id, issuer_id=user_id, confirm_non_original=True,
            )
            print(f"    [{outcome.state.value}] {product['title']}")

    await services.shutdown()
    print("\nDone.")


if __name__ == "__main__":
    asyncio.run(seed_marketplace())
