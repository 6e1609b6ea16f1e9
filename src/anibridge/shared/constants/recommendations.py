"""
Recommendation Constants

Relation kinds, list sizes and strategy labels for title recommendations.
"""


class RecommendationPolicy:
    """Recommendation strategy parameters."""

    RELATION_KINDS = ("Sequel", "Prequel", "Spin-off", "Side story")
    GENRE_COUNT = 2
    GENRE_LIMIT = 15
    TOP_LIMIT = 12

    TYPE_RELATED = "related"
    TYPE_GENRE = "genre"
    TYPE_TOP = "top"
