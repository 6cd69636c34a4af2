"""
Resolves the single supported region (Ethiopia by default) to its Aclimate id.
"""

import logging
from typing import Any, Callable, Dict, Optional

from .models import Region, record_id

logger = logging.getLogger(__name__)

RegionPredicate = Callable[[Region], bool]


def match_region(name: Optional[str] = "ethiopia", iso2: Optional[str] = "ET") -> RegionPredicate:
    """
    Build a predicate matching a case-insensitive name substring or an exact
    ISO-2 code.
    """
    needle = name.lower() if name else None

    def predicate(region: Region) -> bool:
        if needle and needle in region.name.lower():
            return True
        return bool(iso2) and region.iso2 == iso2

    predicate.cache_key = (needle, iso2)
    return predicate


DEFAULT_REGION_PREDICATE = match_region()


class RegionResolver:
    """
    Fetches the country list and remembers the first matching region for the
    lifetime of the process. A miss is not remembered.
    """

    def __init__(self, client: Any, default_predicate: RegionPredicate = DEFAULT_REGION_PREDICATE):
        self.client = client
        self.default_predicate = default_predicate
        self._resolved: Dict[Any, Region] = {}

    async def resolve_region(self, predicate: Optional[RegionPredicate] = None) -> Optional[Region]:
        predicate = predicate or self.default_predicate
        key = getattr(predicate, "cache_key", predicate)
        if key in self._resolved:
            return self._resolved[key]

        countries = await self.client.get_countries()
        for record in countries or []:
            if record_id(record) is None:
                continue
            region = Region.from_payload(record)
            if predicate(region):
                logger.info(f"Resolved region {region.name} ({region.iso2}) to id {region.id}")
                self._resolved[key] = region
                return region

        logger.warning("No region in the EDACaP country list matched the configured region")
        return None

    async def resolve_region_id(self, predicate: Optional[RegionPredicate] = None) -> Optional[str]:
        """Region id for the predicate, or None when no region matches."""
        region = await self.resolve_region(predicate)
        return region.id if region else None
