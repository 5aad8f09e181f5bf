from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.services import CategoryService
from modules.products.dtos import ProductInputDTO
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

CATALOG = [
    ("AMD Ryzen 7 7800X3D", ["CPU"], Decimal("449.00"), 25),
    ("Intel Core i7-14700K", ["CPU"], Decimal("409.99"), 30),
    ("Intel Core i5-14400F", ["CPU"], Decimal("199.90"), 40),
    ("NVIDIA GeForce RTX 4070", ["GPU"], Decimal("599.00"), 12),
    ("AMD Radeon RX 7800 XT", ["GPU"], Decimal("499.00"), 15),
    ("Corsair Vengeance 32GB DDR5", ["RAM"], Decimal("119.90"), 60),
    ("Kingston Fury 16GB DDR4", ["RAM"], Decimal("54.90"), 80),
    ("Samsung 990 Pro 2TB", ["Storage"], Decimal("179.00"), 35),
    ("WD Blue 1TB HDD", ["Storage"], Decimal("44.90"), 50),
    ("ASUS ROG Strix B650-A", ["Motherboard"], Decimal("229.00"), 18),
    ("Seasonic Focus GX-750", ["Power Supply"], Decimal("129.90"), 22),
    ("Noctua NH-D15", ["Cooling", "CPU Accessories"], Decimal("109.90"), 20),
]


class Command(BaseCommand):
    help = "Seed the catalog with sample categories and products."

    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")

        users_created = self._seed_users()
        service = ProductService(
            repository=ProductDjangoRepository(),
            category_service=CategoryService(repository=CategoryDjangoRepository()),
        )
        products_created = self._seed_products(service)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={products_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", password="user123")
            created += 1
        return created

    def _seed_products(self, service: ProductService) -> int:
        self.stdout.write("Creating products...")
        created = 0
        for name, categories, price, quantity in CATALOG:
            if service.find_by_name(name):
                continue
            service.create_product(
                ProductInputDTO(
                    name=name,
                    price=price,
                    quantity=quantity,
                    categories=categories,
                )
            )
            created += 1
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return created
