"""
Closet vocabulary: categories, color palette and the keyword lists used to
recognize them in product pages.

Used by the heuristic extractors (matching) and by the product transformer
(validation of the final record).
"""

# Closet categories, in the order keyword matching tries them
CATEGORIES: tuple[str, ...] = ("tops", "bottoms", "shoes", "outerwear", "accessories")

# Keyword lists matched (case-insensitive substring) against url + title + description.
# Lists overlap on purpose (hoodie, blazer, ...): the first category in CATEGORIES order wins.
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "tops": [
        "shirt", "top", "blouse", "t-shirt", "tee", "sweater", "hoodie", "tank", "crop",
        "bra", "sports bra", "jogger", "polo", "henley", "turtleneck", "sweatshirt",
        "long sleeve", "short sleeve", "tank top", "crop top", "bodysuit", "camisole",
        "blazer", "cardigan", "pullover", "crewneck", "v-neck", "tunic",
    ],
    "bottoms": [
        "pants", "jeans", "trousers", "shorts", "skirt", "leggings", "tights", "joggers",
        "sweatpants", "chinos", "cargo", "capri", "culottes", "palazzo", "wide leg",
        "straight leg", "skinny", "bootcut", "flare", "cropped pants",
    ],
    "shoes": [
        "shoe", "sneaker", "boot", "sandal", "heel", "slipper", "sneakers", "trainer",
        "running shoe", "athletic shoe", "dress shoe", "loafer", "oxford", "moccasin",
        "flats", "pumps", "stilettos", "wedges", "espadrilles", "mules", "clogs",
    ],
    "outerwear": [
        "coat", "jacket", "parka", "blazer", "cardigan", "vest", "windbreaker",
        "bomber", "denim jacket", "leather jacket", "trench", "peacoat", "puffer",
        "fleece", "hoodie", "sweatshirt", "pullover", "zip-up", "anorak",
    ],
    "accessories": [
        "bag", "hat", "belt", "watch", "jewelry", "scarf", "gloves", "headband",
        "socks", "sunglasses", "wallet", "backpack", "purse", "tote", "clutch",
        "necklace", "bracelet", "earrings", "ring", "tie", "bow tie", "cufflinks",
    ],
}

# Shorter hints for schema.org category strings ("Clothing > Tops", "Footwear", ...)
STRUCTURED_CATEGORY_HINTS: list[tuple[str, tuple[str, ...]]] = [
    ("tops", ("top", "shirt", "blouse")),
    ("bottoms", ("bottom", "pant", "trouser")),
    ("shoes", ("shoe", "footwear")),
    ("outerwear", ("outerwear", "jacket", "coat")),
    ("accessories", ("accessor",)),
]

# Named colors recognized in pages, in match priority order (includes aliases)
COLOR_PALETTE: tuple[str, ...] = (
    "black", "white", "gray", "grey", "navy", "blue", "red", "green",
    "yellow", "orange", "pink", "purple", "brown", "beige", "multicolor", "multi-color",
    "burgundy", "maroon", "teal", "cyan", "lime", "olive", "tan", "khaki",
)

COLOR_ALIASES: dict[str, str] = {
    "grey": "gray",
    "multi-color": "multicolor",
}

# Colors that may appear in an extracted record
CANONICAL_COLORS: frozenset[str] = frozenset(
    COLOR_ALIASES.get(color, color) for color in COLOR_PALETTE
)

# Image URL filters (matched against the raw, lowercased URL)
IMAGE_EXCLUDE_KEYWORDS: tuple[str, ...] = (
    "icon", "logo", "avatar", "favicon", "badge", "button", "arrow",
)
IMAGE_INCLUDE_KEYWORDS: tuple[str, ...] = (
    "product", "item", "image", "photo", "picture", "gallery",
)
BACKGROUND_INCLUDE_KEYWORDS: tuple[str, ...] = ("product", "item")
