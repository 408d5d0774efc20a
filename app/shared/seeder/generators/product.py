"""Product catalog generator."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.shared.seeder.resolver import DependencyPool
    from app.shared.seeder.templates import EntityTemplate
    from app.shared.seeder.values import ValueGenerator


# Product name components for realistic generation
PRODUCT_ADJECTIVES = [
    "Classic",
    "Premium",
    "Compact",
    "Deluxe",
    "Essential",
    "Ergonomic",
    "Handcrafted",
    "Modern",
    "Rustic",
    "Sleek",
    "Smart",
    "Vintage",
    "Wireless",
    "Lightweight",
    "Organic",
]

PRODUCT_NOUNS_BY_CATEGORY = {
    "electronics": [
        "Headphones",
        "Speaker",
        "Keyboard",
        "Monitor",
        "Charger",
        "Webcam",
        "Tablet",
        "Router",
        "Smartwatch",
        "Drone",
    ],
    "books": [
        "Novel",
        "Cookbook",
        "Atlas",
        "Anthology",
        "Biography",
        "Field Guide",
        "Handbook",
        "Journal",
        "Memoir",
        "Workbook",
    ],
    "clothing": [
        "Jacket",
        "Sweater",
        "Jeans",
        "T-Shirt",
        "Scarf",
        "Hoodie",
        "Sneakers",
        "Dress",
        "Cap",
        "Socks",
    ],
    "home": [
        "Lamp",
        "Chair",
        "Planter",
        "Rug",
        "Bookshelf",
        "Cutting Board",
        "Candle",
        "Throw Pillow",
        "Clock",
        "Vase",
    ],
}

# Default nouns if category not in dict
DEFAULT_NOUNS = ["Product", "Item", "Gadget", "Accessory", "Kit"]

WARRANTIES = ["1 year", "2 years", "3 years", "5 years"]
LANGUAGES = ["English", "Spanish", "French", "German"]
SIZES = ["XS", "S", "M", "L", "XL", "XXL"]
MATERIALS = ["Cotton", "Polyester", "Wool", "Leather", "Metal", "Plastic"]
CARE_INSTRUCTIONS = ["Machine wash", "Hand wash", "Dry clean only", "Air dry"]

SpecBuilder = Callable[["ValueGenerator"], tuple[str, Any]]

# Specification key -> (document field, value) builder
SPECIFICATION_BUILDERS: dict[str, SpecBuilder] = {
    "brand": lambda v: ("brand", v.company()),
    "model": lambda v: ("model", v.string(6)),
    "warranty": lambda v: ("warranty", v.choice(WARRANTIES)),
    "power_consumption": lambda v: ("powerConsumption", f"{v.integer(10, 500)}W"),
    "author": lambda v: ("author", v.full_name()),
    "publisher": lambda v: ("publisher", v.company()),
    "isbn": lambda v: ("isbn", v.string(13, "numeric")),
    "pages": lambda v: ("pages", v.integer(50, 1000)),
    "language": lambda v: ("language", v.choice(LANGUAGES)),
    "size": lambda v: ("size", v.choice(SIZES)),
    "color": lambda v: ("color", v.color()),
    "material": lambda v: ("material", v.choice(MATERIALS)),
    "care_instructions": lambda v: ("careInstructions", v.choice(CARE_INSTRUCTIONS)),
    "dimensions": lambda v: ("dimensions", f'{v.integer(1, 100)}" x {v.integer(1, 100)}"'),
    "assembly_required": lambda v: ("assemblyRequired", v.boolean()),
}


class ProductGenerator:
    """Generator for product documents."""

    SKU_LENGTH = 8
    MAX_SKU_ATTEMPTS = 1000

    def __init__(
        self,
        values: ValueGenerator,
        template: EntityTemplate,
        pools: dict[str, DependencyPool] | None = None,
    ) -> None:
        """Initialize the product generator.

        Args:
            values: Value generator for this pass.
            template: ``products`` template.
            pools: Unused; products have no parents.

        Raises:
            InvalidConstraint: If a required template field is missing or malformed.
        """
        self.values = values
        self.template = template
        self.categories = template.require("categories")
        self.tiers = {
            name: template.require_range("pricingTiers", name)
            for name in template.require("pricingTiers")
        }
        self.statuses = template.require("statusOptions")
        self.inventory = template.require("inventorySettings")
        self.spec_keys = template.get("specifications", {})
        self.tags = template.get("tags", ())
        self._used_skus: set[str] = set()

    def _generate_unique_sku(self) -> str:
        """Generate a SKU not yet used in this pass.

        Raises:
            RuntimeError: If no unused SKU is found within the attempt budget.
        """
        for _ in range(self.MAX_SKU_ATTEMPTS):
            sku = self.values.string(self.SKU_LENGTH)
            if sku not in self._used_skus:
                self._used_skus.add(sku)
                return sku
        raise RuntimeError(
            f"Failed to generate unique SKU after {self.MAX_SKU_ATTEMPTS} attempts"
        )

    def _generate_name(self, category_id: str) -> str:
        adjective = self.values.choice(PRODUCT_ADJECTIVES)
        noun = self.values.choice(PRODUCT_NOUNS_BY_CATEGORY.get(category_id, DEFAULT_NOUNS))
        return f"{adjective} {noun}"

    def _generate_specifications(self, category_id: str) -> dict[str, Any]:
        specs: dict[str, Any] = {}
        for key in self.spec_keys.get(category_id, ()):
            builder = SPECIFICATION_BUILDERS.get(key)
            if builder is None:
                specs[key] = self.values.word()
                continue
            field, value = builder(self.values)
            specs[field] = value
        return specs

    def _build(self) -> dict[str, Any]:
        category = self.values.choice(self.categories)
        tier = self.values.choice(sorted(self.tiers))
        low, high = self.tiers[tier]
        max_quantity = int(self.inventory.get("maxQuantity", 1000))

        return {
            "name": self._generate_name(category["id"]),
            "description": self.values.paragraph(),
            "sku": self._generate_unique_sku(),
            "price": float(self.values.decimal(low, high, 2)),
            "imageUrl": self.values.image_url(),
            "category": category["id"],
            "categoryName": category["name"],
            "status": self.values.choice(self.statuses),
            "pricingTier": tier,
            "inventory": {
                "quantity": self.values.integer(0, max_quantity),
                "lowStockThreshold": self.inventory.get("lowStockThreshold", 10),
                "outOfStockThreshold": self.inventory.get("outOfStockThreshold", 0),
                "autoReorder": bool(self.inventory.get("autoReorder", False)),
            },
            "specifications": self._generate_specifications(category["id"]),
            "brand": self.values.company(),
            "weight": self.values.number(0.1, 50, 2),
            "dimensions": {
                "length": self.values.number(1, 100, 1),
                "width": self.values.number(1, 100, 1),
                "height": self.values.number(1, 100, 1),
            },
            "tags": self.values.sample(self.tags, min(1, len(self.tags)), min(3, len(self.tags))),
            "rating": self.values.number(1, 5, 1),
            "reviewCount": self.values.integer(0, 500),
            "createdAt": self.values.now,
            "updatedAt": self.values.now,
        }

    def generate(self, count: int) -> list[dict[str, Any]]:
        """Generate product records.

        Returns:
            List of product documents ready for persistence.
        """
        return [self._build() for _ in range(count)]
