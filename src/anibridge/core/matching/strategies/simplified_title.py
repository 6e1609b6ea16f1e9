"""Simplified-title strategy: drop the subtitle after the first colon or hyphen."""

from __future__ import annotations

from anibridge.core.matching.models import TitleQuery
from anibridge.core.normalization import simplify_title
from anibridge.shared.constants import ConfidenceTier


class SimplifiedTitleStrategy:
    name = "simplified_title"
    tier = ConfidenceTier.SIMPLIFIED_TITLE

    def label_for(self, query: TitleQuery) -> str | None:
        simplified = simplify_title(query.title)
        if not simplified or simplified == query.title:
            return None
        return simplified
