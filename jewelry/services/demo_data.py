from __future__ import annotations

import random
from datetime import date, timedelta

from jewelry.gateway import RecordGateway
from jewelry.schema import COLLECTIONS
from jewelry.services.inventory import create_stock_item
from jewelry.services.leave_amounts import create_leave_amount
from jewelry.services.maintenance import create_maintenance
from jewelry.services.purchases import create_purchase
from jewelry.services.sales import create_sale

DEMO_STOCK = [
    # name, type, grams per unit, qty, price per unit
    ("Gold Ring", "Ring", 4.5, 25, 28000),
    ("Diamond Ring", "Ring", 3.8, 10, 65000),
    ("Gold Chain", "Chain", 10.0, 20, 62000),
    ("Pearl Necklace", "Necklace", 18.0, 8, 45000),
    ("Silver Anklet", "Anklet", 22.0, 30, 3500),
    ("Gold Bangle", "Bangle", 12.0, 15, 74000),
    ("Ruby Pendant", "Pendant", 2.6, 12, 21000),
    ("Jhumka Earring", "Earring", 6.2, 18, 38000),
]

DEMO_BUYERS = ["Priya Sharma", "Rajesh Kumar", "Anita Singh", "Walk-in", "Meena Iyer", "Arjun Rao"]


def wipe_all(gateway: RecordGateway) -> None:
    # Keep schema, delete data.
    for collection in COLLECTIONS:
        gateway.clear(collection)


def load_demo_data(gateway: RecordGateway, *, seed: int = 7, days: int = 120) -> None:
    rng = random.Random(seed)
    today = date.today()

    for name, ptype, grams, qty, _ in DEMO_STOCK:
        create_stock_item(
            gateway,
            product_name=name,
            product_type=ptype,
            product_weight_grams=grams,
            quantity_available=qty,
        )

    # Sales spread over the last `days` days, a couple guaranteed today.
    for i in range(days):
        sale_day = today - timedelta(days=i)
        for _ in range(rng.randint(0, 3) if i else 2):
            name, ptype, grams, _, price = rng.choice(DEMO_STOCK)
            qty = rng.choice([1, 1, 1, 2])
            amount = price * qty
            given = rng.choice([amount, amount, round(amount * 0.6, -2), 0])
            create_sale(
                gateway,
                product_name=name,
                product_type=ptype,
                product_weight_grams=round(grams + rng.uniform(-0.2, 0.2), 2),
                quantity=qty,
                buyer_name=rng.choice(DEMO_BUYERS),
                amount=amount,
                given_amount=given,
                sale_date=sale_day,
            )

    for i in range(0, days, 14):
        name, ptype, grams, _, price = rng.choice(DEMO_STOCK)
        qty = rng.randint(2, 6)
        create_purchase(
            gateway,
            product_name=name,
            product_type=ptype,
            product_weight_grams=grams,
            quantity=qty,
            buyer_name="Karigar Supplies",
            amount=round(price * qty * 0.8, -2),
            purchase_date=today - timedelta(days=i),
        )

    for _ in range(2):
        name, ptype, grams, _, price = rng.choice(DEMO_STOCK)
        create_leave_amount(
            gateway,
            product_name=name,
            product_type=ptype,
            product_weight_grams=grams,
            quantity=1,
            buyer_name=rng.choice(DEMO_BUYERS),
            amount=price,
            notes="Taken on approval",
        )

    create_maintenance(
        gateway,
        start_date=today + timedelta(days=3),
        end_date=today + timedelta(days=4),
        description="Quarterly stock count and cleaning",
        status="scheduled",
    )
