from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.products.dtos import CreateProductDTO
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

CATALOG = [
    ("iPhone 15 Pro", "Electronics", Decimal("999.99")),
    ("Galaxy S24", "Electronics", Decimal("899.00")),
    ("Mechanical Keyboard", "Electronics", Decimal("129.90")),
    ("Gaming Mouse", "Electronics", Decimal("59.90")),
    ("27 inch Monitor", "Electronics", Decimal("329.00")),
    ("Office Desk", "Furniture", Decimal("249.00")),
    ("Ergonomic Chair", "Furniture", Decimal("399.00")),
    ("Bookshelf", "Furniture", Decimal("149.00")),
    ("A4 Paper Ream", "Office", Decimal("6.49")),
    ("Blue Pen Pack", "Office", Decimal("3.99")),
    ("Notebook", "Office", Decimal("4.50")),
    ("Desk Lamp", "Office", Decimal("24.90")),
]


class Command(BaseCommand):
    help = "Seed the database with demo products for one store."

    def add_arguments(self, parser) -> None:
        parser.add_argument("--store", default="STORE-001", help="Target store id.")
        parser.add_argument(
            "--count",
            type=int,
            default=len(CATALOG),
            help="How many catalog entries to seed (max %d)." % len(CATALOG),
        )
        parser.add_argument("--seed", type=int, default=42, help="Random seed.")

    def handle(self, *args, **options):
        random.seed(options["seed"])
        store_id = options["store"]
        service = ProductService(repository=ProductDjangoRepository())

        self.stdout.write(f"Seeding products for {store_id}...")
        created = 0
        for title, category, price in CATALOG[: max(options["count"], 0)]:
            if Product.objects.filter(store_id=store_id, title=title).exists():
                continue
            service.create_product(
                CreateProductDTO(
                    title=title,
                    description=f"{title} ({category})",
                    price=price,
                    store_id=store_id,
                    category=category,
                    stock=random.randint(0, 200),
                )
            )
            created += 1

        self.stdout.write(
            self.style.SUCCESS(f"Seed completed: store={store_id}, products={created}")
        )
