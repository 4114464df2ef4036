"""
Category seed data used by the management commands.

System categories select synthetic feeds and never hold products. Normal
categories are the ones makers pick from when publishing.
"""

SYSTEM_CATEGORIES = [
    {"name": "Recommended", "slug": "recommended", "icon": "star", "order": 0},
    {"name": "New", "slug": "new", "icon": "clock", "order": 1},
]

NORMAL_CATEGORIES = [
    {"name": "DevTools", "slug": "devtools", "icon": "terminal", "order": 10},
    {"name": "Productivity", "slug": "productivity", "icon": "check-square", "order": 11},
    {"name": "Design", "slug": "design", "icon": "pen-tool", "order": 12},
    {"name": "Marketing", "slug": "marketing", "icon": "trending-up", "order": 13},
    {"name": "AI", "slug": "ai", "icon": "cpu", "order": 14},
]
