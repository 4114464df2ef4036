# Relationship feeds, resolved against a subject user
FEED_TYPES = {
    "CREATED": "created",
    "LIKED": "liked",
    "FAVORITED": "favorited",
}

# System category slugs that select a synthetic public feed
ALL_SLUG = "all"
RECOMMENDED_SLUG = "recommended"
NEW_SLUG = "new"
UNFILTERED_SLUGS = {ALL_SLUG, RECOMMENDED_SLUG}

# In-memory relevance weights applied when searching
SEARCH_WEIGHTS = {
    "name": 100,
    "description": 50,
    "category": 30,
    "username": 10,
}

MIN_PRODUCT_CATEGORIES = 1
MAX_PRODUCT_CATEGORIES = 3

# Fields copied as-is from create/update payloads
EDITABLE_PRODUCT_FIELDS = ["name", "description", "detail", "website_url", "github_url"]
