from decimal import Decimal

SAMPLE_EQUIPMENT = [
    {
        "name": "Heavy Duty Tractor",
        "category": "Tractor",
        "description": "Perfect for plowing and heavy farming tasks",
        "price_per_day": Decimal("1500"),
    },
    {
        "name": "Combine Harvester",
        "category": "Harvester",
        "description": "Efficient harvesting for wheat, rice, and corn",
        "price_per_day": Decimal("2500"),
    },
    {
        "name": "Modern Plough",
        "category": "Plough",
        "description": "Advanced plough for soil preparation",
        "price_per_day": Decimal("800"),
    },
    {
        "name": "Crop Sprayer",
        "category": "Sprayer",
        "description": "Efficient pesticide and fertilizer application",
        "price_per_day": Decimal("1200"),
    },
    {
        "name": "Mini Tractor",
        "category": "Tractor",
        "description": "Compact tractor for small farms",
        "price_per_day": Decimal("1000"),
    },
    {
        "name": "Seed Drill",
        "category": "Plough",
        "description": "Precision seed planting equipment",
        "price_per_day": Decimal("600"),
    },
]


def sample_catalog():
    """Offline copy of the catalog in API shape, ids assigned in seed order."""
    return [
        {
            "id": index,
            "name": item["name"],
            "category": item["category"],
            "description": item["description"],
            "price_per_day": float(item["price_per_day"]),
            "status": "available",
        }
        for index, item in enumerate(SAMPLE_EQUIPMENT, start=1)
    ]
