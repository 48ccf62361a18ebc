"""
Static lookup tables for context parsing, display names and follow-ups.
"""
import re
from types import MappingProxyType

def _freeze(table):
    return MappingProxyType({key: MappingProxyType(value) if isinstance(value, dict) else value
                             for key, value in table.items()})

# Brand name -> category and search terms
BRAND_CATEGORIES = _freeze({
    # Athletic/Fashion brands
    "lululemon": {"category": "athletic-wear", "terms": ("lululemon", "yoga", "athletic wear")},
    "nike": {"category": "athletic-wear", "terms": ("nike", "sneakers", "sportswear")},
    "adidas": {"category": "athletic-wear", "terms": ("adidas", "shoes", "sportswear")},
    "patagonia": {"category": "outdoor-gear", "terms": ("patagonia", "outdoor", "hiking")},

    # Kitchen/Cooking brands
    "vitamix": {"category": "kitchen", "terms": ("vitamix", "blender", "kitchen")},
    "kitchenaid": {"category": "kitchen", "terms": ("kitchenaid", "mixer", "kitchen")},
    "all-clad": {"category": "kitchen", "terms": ("all-clad", "cookware", "pans")},
    "le creuset": {"category": "kitchen", "terms": ("le creuset", "cookware", "dutch oven")},
    "made in": {"category": "kitchen", "terms": ("made in", "cookware", "professional")},

    # Tech brands
    "apple": {"category": "electronics", "terms": ("apple", "iphone", "ipad", "airpods")},
    "samsung": {"category": "electronics", "terms": ("samsung", "galaxy", "electronics")},
    "sony": {"category": "electronics", "terms": ("sony", "headphones", "camera")},

    # Travel brands
    "away": {"category": "travel", "terms": ("away", "luggage", "suitcase")},
    "tumi": {"category": "travel", "terms": ("tumi", "luggage", "travel gear")},
    "peak design": {"category": "travel", "terms": ("peak design", "camera bag", "travel")},
})

# Interest keyword -> category, search terms and priority
INTEREST_CATEGORIES = _freeze({
    "cooking": {"category": "kitchen", "terms": ("cooking", "kitchen", "cookware", "chef"), "priority": 1},
    "baking": {"category": "kitchen", "terms": ("baking", "kitchen", "bakeware", "pastry"), "priority": 1},
    "travel": {"category": "travel", "terms": ("travel", "luggage", "travel gear", "accessories"), "priority": 1},
    "traveling": {"category": "travel", "terms": ("travel", "luggage", "travel gear", "accessories"), "priority": 1},
    "yoga": {"category": "fitness", "terms": ("yoga", "mat", "meditation", "wellness"), "priority": 1},
    "fitness": {"category": "fitness", "terms": ("fitness", "gym", "workout", "exercise"), "priority": 1},
    "running": {"category": "athletic-wear", "terms": ("running", "sneakers", "athletic", "marathon"), "priority": 1},
    "photography": {"category": "electronics", "terms": ("camera", "photography", "lens", "tripod"), "priority": 1},
    "reading": {"category": "books", "terms": ("books", "kindle", "reading", "literature"), "priority": 1},
    "gaming": {"category": "electronics", "terms": ("gaming", "console", "video games", "pc"), "priority": 1},
    "music": {"category": "electronics", "terms": ("headphones", "speakers", "music", "audio"), "priority": 1},
    "art": {"category": "art-supplies", "terms": ("art supplies", "painting", "drawing", "creative"), "priority": 1},
})

# Ordered (pattern, recipient/relationship) pairs, first match wins
RELATIONSHIP_PATTERNS = (
    (re.compile(r"\bmy (?:wife|husband|spouse|partner)\b", re.IGNORECASE), "spouse"),
    (re.compile(r"\bmy (?:mom|mother|dad|father)\b", re.IGNORECASE), "parent"),
    (re.compile(r"\bmy (?:son|daughter|child|kid)\b", re.IGNORECASE), "child"),
    (re.compile(r"\bmy (?:friend|buddy|pal)\b", re.IGNORECASE), "friend"),
    (re.compile(r"\bmy (?:brother|sister|sibling)\b", re.IGNORECASE), "sibling"),
)

# Ordered (pattern, occasion) pairs, first match wins
OCCASION_PATTERNS = (
    (re.compile(r"birthday|turning \d+|\d+th birthday", re.IGNORECASE), "birthday"),
    (re.compile(r"christmas|holiday", re.IGNORECASE), "christmas"),
    (re.compile(r"anniversary", re.IGNORECASE), "anniversary"),
    (re.compile(r"valentine", re.IGNORECASE), "valentine's day"),
    (re.compile(r"graduation", re.IGNORECASE), "graduation"),
    (re.compile(r"wedding", re.IGNORECASE), "wedding"),
)

# Ordered (pattern, kind) pairs for budget extraction, first valid match wins
BUDGET_PATTERNS = (
    (re.compile(r"(?:no more than|under|up to|maximum|max)\s*\$?(\d+)", re.IGNORECASE), "max"),
    (re.compile(r"\$?(\d+)\s*(?:-|to)\s*\$?(\d+)", re.IGNORECASE), "range"),
    (re.compile(r"(?:around|about|roughly)\s*\$?(\d+)", re.IGNORECASE), "around"),
    (re.compile(r"(?:budget.*?\$?(\d+)|\$?(\d+).*?budget)", re.IGNORECASE), "exact"),
)

AGE_PATTERNS = (
    re.compile(r"turning (\d+)", re.IGNORECASE),
    re.compile(r"(\d+)\s*(?:years?|yrs?) old", re.IGNORECASE),
    re.compile(r"(\d+)(?:st|nd|rd|th) birthday", re.IGNORECASE),
)

# Category slug -> display name
CATEGORY_DISPLAY_NAMES = MappingProxyType({
    "kitchen": "Cooking & Kitchen",
    "athletic-wear": "Athletic & Fitness",
    "travel": "Travel Essentials",
    "electronics": "Tech & Electronics",
    "fitness": "Health & Wellness",
    "books": "Books & Reading",
    "art-supplies": "Art & Creative",
    "outdoor-gear": "Outdoor & Adventure",
    "beauty": "Beauty & Personal Care",
    "home": "Home & Living",
})

# Category slug -> (context field, template) used when that field is known
CONTEXTUAL_DISPLAY_NAMES = MappingProxyType({
    "athletic-wear": ("recipient", "Athletic Wear for {recipient}"),
    "travel": ("occasion", "Travel Gear for {occasion}"),
})

# Brand -> display name for its category group
BRAND_DISPLAY_NAMES = MappingProxyType({
    "lululemon": "Lululemon Athleisure",
    "nike": "Nike Athletic Gear",
    "adidas": "Adidas Sportswear",
    "patagonia": "Patagonia Outdoor Gear",
    "vitamix": "Vitamix Blenders",
    "kitchenaid": "KitchenAid Appliances",
    "all-clad": "All-Clad Cookware",
    "le creuset": "Le Creuset Cookware",
    "apple": "Apple Accessories",
    "samsung": "Samsung Electronics",
    "sony": "Sony Audio & Electronics",
    "away": "Away Luggage",
    "tumi": "Tumi Travel Gear",
})

# Category -> related categories for cross-category suggestions
CROSS_CATEGORY_MAPPINGS = MappingProxyType({
    "cooking": ("travel", "kitchen", "outdoor-gear"),
    "travel": ("cooking", "outdoor-gear", "electronics"),
    "fitness": ("athletic-wear", "outdoor-gear", "travel"),
    "athletic-wear": ("fitness", "outdoor-gear", "travel"),
    "electronics": ("travel", "gaming", "photography"),
    "outdoor-gear": ("travel", "fitness", "cooking"),
})

# (from, to) category pairs that have a suggestion rationale
CROSS_CATEGORY_REASONING = _freeze({
    "cooking": {
        "travel": "portable cooking gear for food lovers who travel",
        "outdoor-gear": "camping cookware for outdoor cooking adventures",
    },
    "travel": {
        "cooking": "kitchen essentials that work great for travelers",
        "electronics": "travel-friendly tech gadgets and accessories",
    },
    "fitness": {
        "athletic-wear": "workout clothing to complement your fitness routine",
        "travel": "travel gear for fitness enthusiasts on the go",
    },
})

# Category -> keywords that refer to it in follow-up messages
FOLLOW_UP_KEYWORDS = MappingProxyType({
    "cooking": ("cook", "kitchen", "chef", "food", "recipe"),
    "travel": ("travel", "trip", "vacation", "luggage", "journey"),
    "fitness": ("fitness", "gym", "workout", "exercise", "training"),
    "athletic-wear": ("athletic", "sports", "workout", "active", "running"),
    "electronics": ("tech", "electronic", "gadget", "device", "digital"),
    "outdoor-gear": ("outdoor", "camping", "hiking", "adventure", "nature"),
})

# Follow-up message families, checked in order
SHOW_MORE_PATTERNS = (
    re.compile(r"show me more (?P<hint>.*?)(items?|products?|options?)", re.IGNORECASE),
    re.compile(r"more (?P<hint>.*?)(stuff|things|items?|products?)", re.IGNORECASE),
    re.compile(r"other (?P<hint>.*?)(items?|products?|options?)", re.IGNORECASE),
    re.compile(r"additional (?P<hint>.*?)(items?|products?|gear)", re.IGNORECASE),
)

REFINE_PATTERNS = (
    re.compile(r"cheaper (?P<hint>.*?)(items?|products?|options?)", re.IGNORECASE),
    re.compile(r"under \$(\d+) (?P<hint>.*?)(items?|products?)", re.IGNORECASE),
    re.compile(r"better (?P<hint>.*?)(items?|products?|options?)", re.IGNORECASE),
)

PRICE_CEILING_PATTERN = re.compile(r"under \$(\d+)", re.IGNORECASE)

# Category -> phrase used in follow-up replies
FOLLOW_UP_DISPLAY_NAMES = MappingProxyType({
    "cooking": "cooking essentials",
    "travel": "travel gear",
    "fitness": "fitness equipment",
    "athletic-wear": "athletic wear",
    "electronics": "tech products",
    "outdoor-gear": "outdoor gear",
})
