#!/usr/bin/env python
"""Seed boutique inventory with demo products.
Usage: python bin/seed_inventory.py
"""
from decimal import Decimal

from src.app import create_app
from src.extensions import db
from src.models.inventory_item import InventoryItem
from src.repositories.inventory_item_repository import InventoryItemRepository

PRODUCTS = [
    {'name': 'Agua',          'category': 'Bebidas',   'regular_price': Decimal('4000'),  'service_price': Decimal('6000'),  'stock': 48},
    {'name': 'Gaseosa',       'category': 'Bebidas',   'regular_price': Decimal('5000'),  'service_price': Decimal('8000'),  'stock': 36},
    {'name': 'Cerveza',       'category': 'Bebidas',   'regular_price': Decimal('7000'),  'service_price': Decimal('12000'), 'stock': 60},
    {'name': 'Energizante',   'category': 'Bebidas',   'regular_price': Decimal('9000'),  'service_price': Decimal('15000'), 'stock': 24},
    {'name': 'Preservativos', 'category': 'Cuidado',   'regular_price': Decimal('6000'),  'service_price': Decimal('10000'), 'stock': 100},
    {'name': 'Lubricante',    'category': 'Cuidado',   'regular_price': Decimal('18000'), 'service_price': Decimal('25000'), 'stock': 20},
    {'name': 'Snack',         'category': 'Comida',    'regular_price': Decimal('5000'),  'service_price': Decimal('8000'),  'stock': 30},
]


def seed_inventory(session, products=PRODUCTS):
    """Create missing products by name. Returns the names created."""
    repo = InventoryItemRepository(session)
    created = []
    for data in products:
        item = repo.find_by_name(data['name'])
        if item:
            print(f"  Exists: {item.name} (stock={item.stock})")
            continue
        item = repo.add(InventoryItem(is_active=True, **data))
        print(f"  Created: {item.name} (id={item.id})")
        created.append(item.name)
    session.commit()
    return created


def main():
    app = create_app()
    with app.app_context():
        try:
            print("\n=== Creating Inventory ===")
            seed_inventory(db.session)
            print("\nDone.")
        except Exception:
            db.session.rollback()
            raise


if __name__ == "__main__":
    main()
