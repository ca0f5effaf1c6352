from __future__ import annotations

import base64

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.core.storage import DjangoBlobStore
from modules.exchanges.dtos import ProposeExchangeDTO
from modules.exchanges.repositories.django_repository import ExchangeDjangoRepository
from modules.exchanges.services import ExchangeService
from modules.products.dtos import CreateProductDTO, ImageUploadDTO
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

# 1x1 transparent PNG
PLACEHOLDER_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

SEED_USERS = [
    ("alice", "alice123"),
    ("bob", "bob123"),
    ("carol", "carol123"),
]

CATALOG = {
    "alice": [
        ("Road bike", "Books & Sports", "used", "Aluminium frame, 21 gears."),
        ("Dune (hardcover)", "Books & Sports", "new", "First edition reprint."),
        ("Espresso machine", "Kitchen", "used", "Descaled last month."),
    ],
    "bob": [
        ("Acoustic guitar", "Music", "used", "Steel strings, with gig bag."),
        ("Cast iron pan", "Kitchen", "new", "26 cm, pre-seasoned."),
        ("Hiking backpack", "Books & Sports", "used", "40 L, rain cover included."),
    ],
    "carol": [
        ("Vinyl player", "Music", "used", "Belt drive, new needle."),
        ("Monstera plant", "Garden", "new", "Repotted, 60 cm tall."),
    ],
}


class Command(BaseCommand):
    help = "Seed database with demo users, products and exchanges."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        if Product.objects.filter(owner__in=users.values()).exists():
            self.stdout.write(self.style.WARNING("Demo products already exist. Skipping."))
            return

        product_service = ProductService(
            repository=ProductDjangoRepository(),
            blob_store=DjangoBlobStore(),
        )
        products = self._seed_products(product_service, users)
        exchanges = self._seed_exchanges(product_service, users, products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"products={sum(len(p) for p in products.values())}, "
                f"exchanges={exchanges}"
            )
        )

    def _seed_users(self) -> dict:
        User = get_user_model()
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")

        users = {}
        for username, password in SEED_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(username, password=password)
            users[username] = user
        return users

    def _seed_products(self, service: ProductService, users: dict) -> dict:
        self.stdout.write("Creating products...")
        products: dict = {}
        for username, items in CATALOG.items():
            owner = users[username]
            products[username] = []
            for title, category, condition, description in items:
                product = service.create_product(
                    CreateProductDTO(
                        title=title,
                        category=category,
                        condition=condition,
                        description=description,
                    ),
                    owner_id=owner.pk,
                    image=ImageUploadDTO(
                        filename=f"{title.lower().replace(' ', '_')}.png",
                        content=PLACEHOLDER_PNG,
                        content_type="image/png",
                    ),
                )
                products[username].append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    @transaction.atomic
    def _seed_exchanges(
        self, product_service: ProductService, users: dict, products: dict
    ) -> int:
        self.stdout.write("Creating exchanges...")
        service = ExchangeService(
            exchange_repository=ExchangeDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            product_service=product_service,
        )

        # alice offers her bike for bob's guitar; bob has not answered yet
        service.propose_exchange(
            users["alice"].pk,
            ProposeExchangeDTO(
                product_from=products["alice"][0].id,
                product_to=products["bob"][0].id,
            ),
        )

        # carol trades her vinyl player for bob's pan
        completed = service.propose_exchange(
            users["carol"].pk,
            ProposeExchangeDTO(
                product_from=products["carol"][0].id,
                product_to=products["bob"][1].id,
            ),
        )
        service.select_exchange(users["bob"].pk, str(completed.id))

        self.stdout.write(self.style.SUCCESS("Creating exchanges... Done!"))
        return 2
