"""Seed the Postgres database with an admin user and a demo catalogue.

Idempotent: the admin is inserted with ON CONFLICT DO NOTHING and the demo
products are upserted by id, so the dashboard always shows the same groups.
Run the alembic migrations (or start the app once) before seeding.

Usage:
    python scripts/db_seed.py

Reads DATABASE_URL from the environment; ADMIN_EMAIL / ADMIN_PASSWORD
override the demo admin credentials.
"""
import logging
import os
import sys

import psycopg2
from psycopg2.extras import execute_values

from storeadmin.auth import get_password_hash
from storeadmin.config import DATABASE_URL
from storeadmin.logging_config import setup_logging

logger = logging.getLogger("storeadmin.seed")

ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "password123")

# (name, price, category, subcategory, brand, stock)
DEMO_PRODUCTS = [
    ("Running shoe Air 90", 119.90, "Footwear", "Running", "Stride", 25),
    ("Trail shoe Ridge", 139.00, "Footwear", "Running", "Summit", 12),
    ("Leather sneaker Classic", 89.50, "Footwear", "Casual", "Stride", 40),
    ("Canvas slip-on", 49.99, "Footwear", "Casual", "Harbor", 60),
    ("Merino base layer", 79.00, "Apparel", "Tops", "Summit", 18),
    ("Cotton crew tee", 19.90, "Apparel", "Tops", "Harbor", 150),
    ("Rain shell jacket", 159.00, "Apparel", "Outerwear", "Summit", 9),
    ("Fleece pullover", 69.00, "Apparel", "Outerwear", "Stride", 30),
    ("Daypack 22L", 64.50, "Accessories", "Bags", "Summit", 20),
    ("Wool beanie", 24.00, "Accessories", "Headwear", "Harbor", 75),
]


def connect_db(dsn: str):
    conn = psycopg2.connect(dsn.replace("+asyncpg", ""))
    conn.autocommit = True
    return conn


def seed_admin(conn):
    sql = (
        "INSERT INTO users (email, full_name, password_hash, is_admin) VALUES %s "
        "ON CONFLICT (email) DO NOTHING"
    )
    with conn.cursor() as cur:
        execute_values(cur, sql, [(ADMIN_EMAIL, "Store Admin", get_password_hash(ADMIN_PASSWORD), True)])
    logger.info("Seeded admin user %s", ADMIN_EMAIL)


def seed_products(conn):
    with conn.cursor() as cur:
        for idx, (name, price, category, subcategory, brand, stock) in enumerate(DEMO_PRODUCTS, start=1):
            cur.execute(
                """
                INSERT INTO products (id, name, price, category, subcategory, brand_name, stock)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE SET
                    name = EXCLUDED.name, price = EXCLUDED.price, category = EXCLUDED.category,
                    subcategory = EXCLUDED.subcategory, brand_name = EXCLUDED.brand_name, stock = EXCLUDED.stock
                """,
                (idx, name, price, category, subcategory, brand, stock),
            )
        # keep the serial ahead of the explicit ids
        cur.execute("SELECT setval(pg_get_serial_sequence('products', 'id'), (SELECT MAX(id) FROM products))")
    logger.info("Seeded %d demo products", len(DEMO_PRODUCTS))


def main():
    setup_logging()
    logger.info("DB seed starting")
    try:
        conn = connect_db(DATABASE_URL)
    except psycopg2.Error:
        logger.exception("Failed to connect to database")
        sys.exit(1)

    try:
        seed_admin(conn)
        seed_products(conn)
    finally:
        conn.close()
    logger.info("DB seed complete")


if __name__ == "__main__":
    main()
