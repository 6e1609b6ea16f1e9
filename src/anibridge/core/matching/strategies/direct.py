"""Direct strategy: search with the query title as given."""

from __future__ import annotations

from anibridge.core.matching.models import TitleQuery
from anibridge.shared.constants import ConfidenceTier


class DirectStrategy:
    name = "direct"
    tier = ConfidenceTier.DIRECT

    def label_for(self, query: TitleQuery) -> str | None:
        return query.title
