# Order matters: missing fields are reported in this order.
REQUIRED_FIELDS = [
    "name",
    "image",
    "type",
    "historicalContext",
    "createdAt",
    "discoveredAt",
    "discoveredBy",
    "presentLocation",
    "addedBy",
]

# Per-user tokens of the like writes that applied. Stored with the document,
# never shown to clients.
LIKE_TOKENS_FIELD = "likeTokens"

# Fields a client can never set through an update, even as the owner.
PROTECTED_FIELDS = frozenset(
    {
        "likes",
        "likedBy",
        "addedBy",
        "userId",
        "dateAdded",
        "_id",
        "id",
        LIKE_TOKENS_FIELD,
    }
)

TOP_LIKED_LIMIT = 6

# Conditional like writes that lose a race are re-read and re-applied
# at most this many times.
LIKE_WRITE_ATTEMPTS = 3

SCROLL_BATCH_SIZE = 1000
