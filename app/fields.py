"""Field names used by the product, store and inventory indexes."""
from __future__ import annotations

PRODUCT_ID = "sku"
PRODUCT_NAME = "name"
PRODUCT_DESCRIPTION = "description"
CATEGORY_NAME = "categoryName"
STYLE_NAME = "styleName"
BREWERY_NAME = "breweryName"

STORE_ID = "store"
LOCATION = "location"
AVAILABLE_TO_PROMISE = "availableToPromise"

# Computed at read time, never stored in the index.
LEVEL = "level"

HIGHLIGHT_FIELDS = [PRODUCT_NAME, PRODUCT_DESCRIPTION, CATEGORY_NAME, STYLE_NAME, BREWERY_NAME]
