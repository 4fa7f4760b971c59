"""Product database for the reference store"""

from decimal import Decimal
from typing import Optional

from ..models.product import Product, ProductInput

# Seed catalog
PRODUCTS: list[Product] = [
    Product(
        id=1,
        name="Blue Mouse",
        description="Wireless optical mouse with silent click buttons.",
        price=Decimal("19.99"),
        category="Peripherals",
        stock=120,
    ),
    Product(
        id=2,
        name="Red Mouse",
        description="Ergonomic wired mouse. 6 programmable buttons.",
        price=Decimal("24.99"),
        category="Peripherals",
        stock=80,
    ),
    Product(
        id=3,
        name="Mechanical Keyboard",
        description="Tenkeyless keyboard with hot-swappable switches.",
        price=Decimal("89.00"),
        category="Peripherals",
        stock=40,
    ),
    Product(
        id=4,
        name="Webcam",
        description="1080p webcam with dual microphones and privacy shutter.",
        price=Decimal("59.50"),
        category="Video",
        stock=35,
    ),
    Product(
        id=5,
        name="27-inch 4K Monitor",
        description="IPS panel, 60Hz, USB-C with 65W power delivery.",
        price=Decimal("329.00"),
        category="Video",
        stock=15,
    ),
    Product(
        id=6,
        name="Studio Headphones",
        description="Closed-back headphones for monitoring and mixing.",
        price=Decimal("149.00"),
        category="Audio",
        stock=25,
    ),
    Product(
        id=7,
        name="USB Microphone",
        description="Cardioid condenser microphone with gain control.",
        price=Decimal("99.99"),
        category="Audio",
        stock=0,
    ),
    Product(
        id=8,
        name="Portable SSD 1TB",
        description="USB 3.2 Gen 2 external drive, up to 1050MB/s.",
        price=Decimal("109.00"),
        category="Storage",
        stock=60,
    ),
]


class ProductDatabase:
    """In-memory product database"""

    def __init__(self, products: Optional[list[Product]] = None):
        self.reset(products)

    def reset(self, products: Optional[list[Product]] = None) -> None:
        """Replace the catalog, with the seed catalog by default"""
        seed = PRODUCTS if products is None else products
        self.products: dict[int, Product] = {p.id: p.model_copy() for p in seed}
        self._next_id = max(self.products, default=0) + 1

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def list_products(self, category: Optional[str] = None) -> list[Product]:
        """List products, optionally restricted to one category"""
        results = list(self.products.values())
        if category:
            results = [p for p in results if p.category == category]
        return results

    def list_categories(self) -> list[str]:
        """Distinct categories, in catalog order"""
        return list(dict.fromkeys(p.category for p in self.products.values()))

    def create_product(self, data: ProductInput) -> Product:
        product = Product(id=self._next_id, **data.model_dump())
        self.products[product.id] = product
        self._next_id += 1
        return product

    def update_product(self, product_id: int, data: ProductInput) -> Optional[Product]:
        if product_id not in self.products:
            return None
        product = Product(id=product_id, **data.model_dump())
        self.products[product_id] = product
        return product

    def delete_product(self, product_id: int) -> bool:
        if product_id in self.products:
            del self.products[product_id]
            return True
        return False

    def update_stock(self, product_id: int, quantity_change: int) -> bool:
        """
        Update product stock.

        Args:
            product_id: Product to update
            quantity_change: Positive to add, negative to remove

        Returns:
            True if successful
        """
        product = self.products.get(product_id)
        if not product:
            return False

        new_quantity = product.stock + quantity_change
        if new_quantity < 0:
            return False

        product.stock = new_quantity
        return True


# Singleton instance
product_db = ProductDatabase()
