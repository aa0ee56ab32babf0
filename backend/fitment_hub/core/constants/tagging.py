"""
Tagging constants — tag literals, batch sizes, and GraphQL documents.
"""

# Tag applied to fitment sets that fit every vehicle
UNIVERSAL_TAG: str = "universal"

# Products per aliased productUpdate document
TAG_BATCH_SIZE: int = 10

# Fixed pause between productUpdate batches
TAG_BATCH_DELAY_SECONDS: float = 0.5

# Pause between tagsAdd/tagsRemove batches
TAG_ACTION_DELAY_SECONDS: float = 0.15

# Admin API version pinned for the replacement primitive
TAG_GRAPHQL_API_VERSION: str = "2024-01"

# At most this many per-product error strings are returned in a summary
MAX_SUMMARY_ERRORS: int = 10

TAGS_ADD_MUTATION: str = """
    mutation tagsAdd($id: ID!, $tags: [String!]!) {
      tagsAdd(id: $id, tags: $tags) {
        node { id }
        userErrors { field message }
      }
    }
"""

TAGS_REMOVE_MUTATION: str = """
    mutation tagsRemove($id: ID!, $tags: [String!]!) {
      tagsRemove(id: $id, tags: $tags) {
        node { id }
        userErrors { field message }
      }
    }
"""
