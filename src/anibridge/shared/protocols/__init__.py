"""Protocol interfaces shared between layers."""

from anibridge.shared.protocols.services import CatalogSearcherProtocol, KeyValueCacheProtocol

__all__ = ["CatalogSearcherProtocol", "KeyValueCacheProtocol"]
