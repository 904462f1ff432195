"""
Record Transformer

Normalizes heterogeneous raw product records (saree.json exports, admin
pastes, legacy fallback data) into CanonicalProduct.

Transformation never fails: every missing or malformed field falls back to
a default so that a best-effort import always produces a storable product.
"""

from __future__ import annotations

import random
import string
import time
from collections.abc import Mapping
from typing import Dict, Optional, Set

from ..common.config_loader import (
    get_known_categories,
    load_care_instructions,
    load_category_map,
)
from ..common.constants import (
    DEFAULT_CARE,
    DEFAULT_LENGTH_METRES,
    DEFAULT_NAME,
    DEFAULT_RATING,
    DEFAULT_WEIGHT_GRAMS,
    MAX_RATING,
)
from ..common.text_utils import collapse_whitespace, name_initials
from ..common.value_utils import (
    non_negative_int,
    parse_timestamp,
    positive_or,
    to_bool,
    to_number,
    to_string_list,
    to_text,
    unique_in_order,
)
from ..models import CanonicalProduct, RawRecord

_BASE36 = string.digits + string.ascii_lowercase


def normalize_images(raw: RawRecord) -> list:
    """
    Collect image URLs from any of the accepted shapes.

    Priority: `images` (list or single string), then `image`, then `imageUrl`.
    """
    for key in ("images", "image", "imageUrl"):
        images = to_string_list(raw.get(key))
        if images:
            return images
    return []


class RecordTransformer:
    """
    Maps raw records onto the catalog schema.

    Usage:
        transformer = RecordTransformer()
        product = transformer.transform({"name": "Magenta Silk Saree", "category": "silk"})
        # product.sku == "SIL-MSS-0427" (random suffix)
    """

    def __init__(
        self,
        category_map: Optional[Dict[str, str]] = None,
        known_categories: Optional[Set[str]] = None,
        care_instructions: Optional[Dict[str, str]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the transformer.

        Args:
            category_map: Source -> storefront category. If None, loads from config.
            known_categories: Categories that get a category-coded SKU.
                If None, loads from config.
            care_instructions: Default care text per category. If None, loads from config.
            rng: Random source for SKU suffixes (seed it for reproducible SKUs)
        """
        self.category_map = load_category_map() if category_map is None else category_map
        self.known_categories = (
            get_known_categories() if known_categories is None else known_categories
        )
        self.care_instructions = (
            load_care_instructions() if care_instructions is None else care_instructions
        )
        self.rng = rng or random.Random()

        # Case-insensitive fallback lookup
        self._category_map_lower = {k.lower(): v for k, v in self.category_map.items()}

    def map_category(self, category: str) -> str:
        """Translate a source category; unknown categories pass through unchanged."""
        if not category:
            return ""
        if category in self.category_map:
            return self.category_map[category]
        return self._category_map_lower.get(category.lower(), category)

    def generate_sku(self, name: str, category: str) -> str:
        """
        Generate a SKU for a record that has none.

        Known categories: {CAT}-{INITIALS}-{NNNN}, e.g. "SIL-MSS-0427".
        Anything else: "SKU-{epoch millis}-{9 base36 chars}".
        """
        if category in self.known_categories:
            category_code = category[:3].upper()
            return f"{category_code}-{name_initials(name)}-{self.rng.randint(0, 9999):04d}"

        suffix = ''.join(self.rng.choice(_BASE36) for _ in range(9))
        return f"SKU-{int(time.time() * 1000)}-{suffix}"

    def transform(self, raw: RawRecord) -> CanonicalProduct:
        """
        Normalize one raw record.

        Args:
            raw: Raw record; non-mapping input is treated as an empty record

        Returns:
            CanonicalProduct with every default applied. created_at/updated_at
            are None unless the record carries a parseable createdAt, meaning
            the writer assigns the server time.
        """
        if not isinstance(raw, Mapping):
            raw = {}

        name = to_text(raw.get("name"), DEFAULT_NAME)
        category = self.map_category(to_text(raw.get("category")))
        fabric = to_text(raw.get("fabric"))
        occasion = to_text(raw.get("occasion"))

        description = to_text(raw.get("description")) or collapse_whitespace(
            f"{name} {fabric} saree, perfect for {occasion or 'various'} occasions."
        )

        price = to_number(raw.get("price"))
        price = price if price and price > 0 else 0.0
        original_price = to_number(raw.get("originalPrice"))
        original_price = original_price if original_price and original_price > 0 else price

        rating = to_number(raw.get("rating")) or DEFAULT_RATING
        rating = min(max(rating, 0.0), MAX_RATING)
        reviews = non_negative_int(raw.get("reviews"))

        color = to_text(raw.get("color"))
        colors = to_string_list(raw.get("colors")) or ([color] if color else [])

        size = positive_or(raw.get("size"), positive_or(raw.get("length"), DEFAULT_LENGTH_METRES))
        length = positive_or(raw.get("length"), positive_or(raw.get("size"), DEFAULT_LENGTH_METRES))

        sku = to_text(raw.get("sku")) or self.generate_sku(name, category)

        return CanonicalProduct(
            name=name,
            sku=sku,
            category=category,
            description=description,
            price=price,
            original_price=original_price,
            images=normalize_images(raw),
            in_stock=non_negative_int(raw.get("inStock")),
            rating=rating,
            reviews=reviews,
            color=color,
            colors=unique_in_order(colors),
            size=size,
            length=length,
            weight=positive_or(raw.get("weight"), DEFAULT_WEIGHT_GRAMS),
            fabric=fabric,
            occasion=occasion,
            features=to_string_list(raw.get("features")),
            care=to_text(raw.get("care")) or self.care_instructions.get(category, DEFAULT_CARE),
            blouse_included=to_bool(raw.get("blouseIncluded"), True),
            featured=to_bool(raw.get("featured"), False),
            popularity=reviews * rating if reviews else 0.0,
            created_at=parse_timestamp(raw.get("createdAt")),
        )


_default_transformer: Optional[RecordTransformer] = None


def get_transformer() -> RecordTransformer:
    """Shared transformer built from config (loaded once)."""
    global _default_transformer
    if _default_transformer is None:
        _default_transformer = RecordTransformer()
    return _default_transformer


def transform_record(
    raw: RawRecord,
    category_map: Optional[Dict[str, str]] = None,
    known_categories: Optional[Set[str]] = None,
    rng: Optional[random.Random] = None,
) -> CanonicalProduct:
    """
    Normalize a raw record.

    Without overrides the shared config-driven transformer is used.
    """
    if category_map is None and known_categories is None and rng is None:
        return get_transformer().transform(raw)
    transformer = RecordTransformer(
        category_map=category_map,
        known_categories=known_categories,
        rng=rng,
    )
    return transformer.transform(raw)
