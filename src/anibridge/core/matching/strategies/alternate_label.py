"""Alternate-label strategy.

Substitutes one other label for the query title: the first alternate
title whose normalized form differs from the query's, otherwise the
content-type label when the title does not already contain it.
"""

from __future__ import annotations

import logging

from anibridge.core.matching.models import TitleQuery
from anibridge.core.normalization import normalize_title
from anibridge.shared.constants import ConfidenceTier

logger = logging.getLogger(__name__)


class AlternateLabelStrategy:
    name = "alternate_label"
    tier = ConfidenceTier.ALTERNATE_LABEL

    def label_for(self, query: TitleQuery) -> str | None:
        """Pick the substitute label, or None when metadata offers nothing new.

        Examples:
            >>> meta = ContentMetadata(alternate_titles=("Attack on Titan",))
            >>> AlternateLabelStrategy().label_for(TitleQuery("Shingeki no Kyojin", meta))
            'Attack on Titan'
            >>> meta = ContentMetadata(type="Movie")
            >>> AlternateLabelStrategy().label_for(TitleQuery("One Piece Film Red", meta))
            'Movie'
        """
        metadata = query.metadata
        if metadata is None:
            return None

        normalized_query = normalize_title(query.title)
        for alternate in metadata.alternate_titles:
            normalized_alternate = normalize_title(alternate)
            if normalized_alternate and normalized_alternate != normalized_query:
                return alternate.strip()

        if metadata.type is not None:
            type_label = normalize_title(metadata.type.value)
            if type_label not in normalized_query.split():
                return metadata.type.value

        logger.debug("No alternate label for '%s'", query.title)
        return None
