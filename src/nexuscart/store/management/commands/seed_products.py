"""Management command to seed a demo catalog."""

from decimal import Decimal

from django.core.management.base import BaseCommand

from nexuscart.store.models import Product


PRODUCTS = [
    {
        "name": "Aurora Wireless Headphones",
        "description": "Over-ear headphones with active noise cancelling and 30 hours of battery.",
        "price": Decimal("149.99"),
        "category": "Electronics",
        "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=1200",
    },
    {
        "name": "Nordic Wool Throw",
        "description": "Hand-woven merino throw blanket in natural grey.",
        "price": Decimal("89.00"),
        "category": "Home",
        "image_url": "https://images.unsplash.com/photo-1555041469-a586c61ea9bc?w=1200",
    },
    {
        "name": "Trailhead Daypack",
        "description": "22L water-resistant backpack with padded laptop sleeve.",
        "price": Decimal("64.50"),
        "category": "Outdoors",
        "image_url": "https://images.unsplash.com/photo-1553062407-98eeb64c6a62?w=1200",
    },
    {
        "name": "Ceramic Pour-Over Set",
        "description": "Dripper, carafe and two cups in matte stoneware.",
        "price": Decimal("42.00"),
        "category": "Kitchen",
        "image_url": "https://images.unsplash.com/photo-1495474472287-4d71bcdd2085?w=1200",
    },
    {
        "name": "Minimalist Leather Wallet",
        "description": "Slim bifold in full-grain leather with six card slots.",
        "price": Decimal("35.00"),
        "category": "Accessories",
        "image_url": "https://images.unsplash.com/photo-1627123424574-724758594e93?w=1200",
    },
    {
        "name": "Smart Fitness Band",
        "description": "Heart-rate, sleep and step tracking with a seven-day battery.",
        "price": Decimal("79.99"),
        "category": "Electronics",
        "image_url": "https://images.unsplash.com/photo-1575311373937-040b8e1fd5b6?w=1200",
    },
]


class Command(BaseCommand):
    help = "Seed the catalog with demo products"

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Seed even when the catalog already has products",
        )

    def handle(self, *args, **options):
        if Product.objects.exists() and not options["force"]:
            self.stdout.write("Catalog already has products, skipping (use --force to seed anyway)")
            return

        self.stdout.write("Creating products...")
        created = 0
        for data in PRODUCTS:
            if Product.objects.filter(name=data["name"]).exists():
                self.stdout.write(f"  Skipping existing product: {data['name']}")
                continue
            Product.objects.create(**data)
            created += 1
            self.stdout.write(self.style.SUCCESS(f"  Created: {data['name']}"))

        self.stdout.write(self.style.SUCCESS(f"\nCatalog seed complete! Products: {created}"))
