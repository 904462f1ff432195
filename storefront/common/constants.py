"""
Shared constants for the project.

Defaults applied by the record transformer and limits imposed by the
document store. Tunable values live in config/settings.yaml; these are the
fallbacks used when no setting is given.
"""

# Product defaults
DEFAULT_NAME = "Untitled Product"
DEFAULT_RATING = 4.5
MAX_RATING = 5.0
DEFAULT_LENGTH_METRES = 5.5
DEFAULT_WEIGHT_GRAMS = 600
DEFAULT_CARE = "Dry clean only"

# Firestore limits
MAX_BATCH_WRITES = 500

# Listing
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200
DEFAULT_CATEGORY_PAGE_SIZE = 12
DEFAULT_FEATURED_PAGE_SIZE = 8
DEFAULT_TRENDING_PAGE_SIZE = 8
DEFAULT_SALE_PAGE_SIZE = 12
TRENDING_MIN_RATING = 4.0

# Ingestion
DEFAULT_COLLECTION = "products"
DEFAULT_WRITE_DELAY = 0.5
