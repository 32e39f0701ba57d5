"""Grounded venue discovery.

Two explicit steps:
1. discover_venues: grounded free-text answer plus the citations the
   backend consulted.
2. extract_venues: schema-constrained extraction over the whole discovery
   result, then merge of the call-scoped citations onto every venue.

A venue without numeric coordinates cannot be placed on a map and is dropped.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional

from ..ai import prompts
from ..core.ai_client import AIClient, ai_client
from ..schemas import Coordinates, ExtractedVenue, Goal, GroundingLink, Language, Venue
from ..settings import settings

logger = logging.getLogger("vitality.venues")


@dataclass
class Discovery:
    text: str
    chunks: list[dict] = field(default_factory=list)
    links: list[GroundingLink] = field(default_factory=list)


def links_from_chunks(chunks: list[dict]) -> list[GroundingLink]:
    """Map-sourced uri wins over web; chunks with neither are discarded."""
    links = []
    for chunk in chunks:
        maps = chunk.get("maps") or {}
        web = chunk.get("web") or {}
        uri = maps.get("uri") or web.get("uri")
        if not uri:
            continue
        title = maps.get("title") or web.get("title") or "View Source"
        links.append(GroundingLink(uri=uri, title=title))
    return links


def _coordinate(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return float(value)


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _amenities(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(a) for a in value if isinstance(a, (str, int, float)) and not isinstance(a, bool)]


def _venue_from_item(item: Any, links: list[GroundingLink]) -> Optional[Venue]:
    """Build a Venue from one extracted item, or None if it cannot be placed.

    Only the name and the coordinates are required; every other field falls
    back to its default when the backend sends something unusable.
    """
    if not isinstance(item, dict):
        return None

    name = _text(item.get("name"))
    lat = _coordinate(item.get("lat"))
    lng = _coordinate(item.get("lng"))
    if not name or lat is None or lng is None:
        logger.info("Dropping venue without name or coordinates: %s", item.get("name"))
        return None

    return Venue(
        name=name,
        address=_text(item.get("address")),
        rating=_coordinate(item.get("rating")) or 0,
        distance=_coordinate(item.get("distance")) or 0,
        amenities=_amenities(item.get("amenities")),
        highlights=_text(item.get("highlights")),
        uri=_text(item.get("uri")),
        lat=lat,
        lng=lng,
        grounding_links=links,
    )


async def discover_venues(
    location: str,
    goal: Goal,
    language: Language,
    coords: Optional[Coordinates] = None,
    client: Optional[AIClient] = None,
) -> Optional[Discovery]:
    client = client or ai_client
    grounded = await client.generate_grounded(
        prompts.venue_discovery_prompt(location, goal, language),
        coords=coords,
    )
    if grounded is None or not grounded.text:
        logger.warning("Venue discovery returned no text for location=%r", location)
        return None
    return Discovery(text=grounded.text, chunks=grounded.chunks, links=links_from_chunks(grounded.chunks))


async def extract_venues(discovery: Discovery, client: Optional[AIClient] = None) -> list[Venue]:
    client = client or ai_client
    raw = await client.generate_json(
        prompts.venue_extraction_prompt(discovery.text, discovery.chunks),
        response_schema=list[ExtractedVenue],
    )
    if not raw:
        return []

    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse venues: {e}")
        return []
    if not isinstance(items, list):
        logger.error("Failed to parse venues: expected a JSON array, got %s", type(items).__name__)
        return []

    links = discovery.links[: settings.venue_link_limit]
    venues = []
    for item in items:
        venue = _venue_from_item(item, links)
        if venue is not None:
            venues.append(venue)
    return venues


async def resolve_venues(
    location: str,
    goal: Goal,
    language: Language,
    coords: Optional[Coordinates] = None,
    client: Optional[AIClient] = None,
) -> list[Venue]:
    """Discover venues near `location` suited to `goal`. Never raises for backend problems."""
    discovery = await discover_venues(location, goal, language, coords=coords, client=client)
    if discovery is None:
        return []
    venues = await extract_venues(discovery, client=client)
    logger.info("Resolved %d venue(s) with %d citation(s)", len(venues), len(discovery.links))
    return venues
