"""
Load the sample catalog, professionals and job requests.

Run with ``python -m seed``. Items carry fixed ids, so running it again
overwrites the samples instead of duplicating them.
"""

import logging

import config
from database import db, ensure_indexes, store as default_store
from repositories import ProductRepository, ServiceProfileRepository, ServiceRequestRepository

logger = logging.getLogger(__name__)

PRODUCTS = [
    {"id": "t1", "name": "Cordless Drill Driver", "price": 89.99, "category": "Power Tools",
     "image": "https://picsum.photos/300/300?random=1",
     "description": "18V Cordless Drill with 2 batteries. Essential for any home repair.", "rating": 4.8},
    {"id": "t2", "name": "Pro Claw Hammer", "price": 24.50, "category": "Hand Tools",
     "image": "https://picsum.photos/300/300?random=2",
     "description": "Forged steel head with shock reduction grip.", "rating": 4.9},
    {"id": "t3", "name": "Digital Multimeter", "price": 45.00, "category": "Electrical",
     "image": "https://picsum.photos/300/300?random=3",
     "description": "Measure voltage, current, and resistance safely.", "rating": 4.6},
    {"id": "t4", "name": "Pipe Wrench Set", "price": 35.99, "category": "Plumbing",
     "image": "https://picsum.photos/300/300?random=4",
     "description": "Heavy duty pipe wrenches for plumbing tasks.", "rating": 4.5},
    {"id": "t5", "name": "Safety Goggles", "price": 12.00, "category": "Safety",
     "image": "https://picsum.photos/300/300?random=5",
     "description": "Anti-fog safety glasses for eye protection.", "rating": 4.7},
    {"id": "t6", "name": "Circular Saw", "price": 120.00, "category": "Power Tools",
     "image": "https://picsum.photos/300/300?random=6",
     "description": "7-1/4 inch circular saw for wood cutting.", "rating": 4.8},
]

SERVICE_PROFILES = [
    {"id": "p1", "name": "John Watts", "profession": "Electrician", "rate": 85, "rating": 4.9,
     "image": "https://picsum.photos/200/200?random=10", "available": True},
    {"id": "p2", "name": "Mike Hammer", "profession": "Carpenter", "rate": 70, "rating": 4.7,
     "image": "https://picsum.photos/200/200?random=11", "available": True},
    {"id": "p3", "name": "Sarah Pipes", "profession": "Plumber", "rate": 95, "rating": 5.0,
     "image": "https://picsum.photos/200/200?random=12", "available": False},
    {"id": "p4", "name": "Tom Cool", "profession": "HVAC", "rate": 90, "rating": 4.6,
     "image": "https://picsum.photos/200/200?random=13", "available": True},
    {"id": "p5", "name": "Alex Fix", "profession": "General Handyman", "rate": 55, "rating": 4.4,
     "image": "https://picsum.photos/200/200?random=14", "available": True},
]

SERVICE_REQUESTS = [
    {"id": "r1", "customer_id": "c1", "customer_name": "Alice Johnson",
     "description": "Kitchen light fixture is flickering and making a buzzing sound.",
     "category": "Electrical", "status": "OPEN", "date": "1/25/2026"},
    {"id": "r2", "customer_id": "c2", "customer_name": "Bob Smith",
     "description": "Need help assembling a large wooden wardrobe.",
     "category": "Carpenter", "status": "OPEN", "date": "1/24/2026"},
    {"id": "r3", "customer_id": "c3", "customer_name": "Carol White",
     "description": "Bathroom faucet is leaking and needs replacement.",
     "category": "Plumbing", "status": "IN_PROGRESS", "date": "1/23/2026", "professional_id": "p3"},
]


def seed_repository(repo, items):
    # create() writes without an existence condition, so fixed ids upsert
    for item in items:
        repo.create(item)
    return len(items)


def seed(store):
    """Write every sample item through its repository; returns counts per kind."""
    return {
        "products": seed_repository(ProductRepository(store), PRODUCTS),
        "service_profiles": seed_repository(ServiceProfileRepository(store), SERVICE_PROFILES),
        "service_requests": seed_repository(ServiceRequestRepository(store), SERVICE_REQUESTS),
    }


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    logger.info("Seeding database %s", config.DATABASE_NAME)
    ensure_indexes(db)
    counts = seed(default_store)
    logger.info("Seed complete: %s", ", ".join(f"{k}={v}" for k, v in counts.items()))


if __name__ == "__main__":
    main()
