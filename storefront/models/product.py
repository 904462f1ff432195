"""
Product data models.

Pure data classes for representing catalog products.
No business logic beyond derived read-only values.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

# Loose input shape: every key optional, unknown keys ignored.
RawRecord = Mapping[str, Any]


@dataclass
class CanonicalProduct:
    """
    Catalog product after normalization.

    Attribute names are snake_case; the stored document uses the camelCase
    keys existing storefront readers expect (see to_document()).

    Field Groups:
    - Identity: document id (not stored in the document) and SKU
    - Content: name, description, category, fabric, occasion, features, care
    - Pricing: price and original (pre-discount) price
    - Media: ordered image URLs
    - Inventory and reviews: stock count, rating, review count
    - Physical: colours, length/size in metres, weight in grams
    - Flags: blouse included, featured on the home page
    - Timestamps: None means "assign the server time on write"
    """

    name: str
    sku: str
    category: str = ""
    description: str = ""
    price: float = 0.0
    original_price: float = 0.0
    images: List[str] = field(default_factory=list)
    in_stock: int = 0
    rating: float = 4.5
    reviews: int = 0
    color: str = ""             # Legacy single colour
    colors: List[str] = field(default_factory=list)
    size: float = 5.5           # Same measurement as length, kept for older readers
    length: float = 5.5
    weight: float = 600.0       # Grams
    fabric: str = ""
    occasion: str = ""
    features: List[str] = field(default_factory=list)
    care: str = ""
    blouse_included: bool = True
    featured: bool = False
    popularity: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: str = ""

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.name:
            raise ValueError("Product name is required")

    @property
    def image(self) -> str:
        """Main image, kept for readers that predate the images list."""
        return self.images[0] if self.images else ""

    @property
    def discount(self) -> float:
        """Fractional discount off the original price, never negative."""
        if not self.original_price:
            return 0.0
        return max(0.0, (self.original_price - self.price) / self.original_price)

    def to_document(self) -> Dict[str, Any]:
        """Document fields as stored in the products collection."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "originalPrice": self.original_price,
            "image": self.image,
            "images": list(self.images),
            "inStock": self.in_stock,
            "rating": self.rating,
            "reviews": self.reviews,
            "color": self.color,
            "colors": list(self.colors),
            "size": self.size,
            "length": self.length,
            "weight": self.weight,
            "fabric": self.fabric,
            "occasion": self.occasion,
            "features": list(self.features),
            "sku": self.sku,
            "blouseIncluded": self.blouse_included,
            "care": self.care,
            "featured": self.featured,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "popularity": self.popularity,
        }
