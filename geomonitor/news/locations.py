"""Location-aware view over the news corpus."""

from typing import Iterable, Optional

from .models import SCOPE_INTERNATIONAL, SCOPE_LOCAL, SCOPE_REGIONAL, NewsItem

# Supported city -> feed region key
CITY_REGIONS = {
    # North America
    "new york": "north_america", "los angeles": "north_america", "chicago": "north_america",
    "houston": "north_america", "dallas": "north_america", "miami": "north_america",
    "san francisco": "north_america", "seattle": "north_america", "denver": "north_america",
    "boston": "north_america", "philadelphia": "north_america", "washington dc": "north_america",
    "atlanta": "north_america", "toronto": "north_america", "vancouver": "north_america",
    "montreal": "north_america", "calgary": "north_america", "ottawa": "north_america",
    "edmonton": "north_america",
    # Europe
    "london": "europe", "paris": "europe", "berlin": "europe", "madrid": "europe",
    "barcelona": "europe", "rome": "europe", "milan": "europe", "amsterdam": "europe",
    "vienna": "europe", "munich": "europe", "frankfurt": "europe", "zurich": "europe",
    "geneva": "europe", "lisbon": "europe", "dublin": "europe", "stockholm": "europe",
    "copenhagen": "europe", "prague": "europe", "budapest": "europe", "warsaw": "europe",
    "hamburg": "europe", "rotterdam": "europe", "the hague": "europe", "gothenburg": "europe",
    "malmo": "europe", "bern": "europe", "porto": "europe", "krakow": "europe",
    # Asia Pacific
    "tokyo": "east_asia", "hong kong": "east_asia", "seoul": "east_asia",
    "singapore": "southeast_asia", "bangkok": "southeast_asia", "kuala lumpur": "southeast_asia",
    "jakarta": "southeast_asia", "manila": "southeast_asia",
    "mumbai": "south_asia", "bangalore": "south_asia", "delhi": "south_asia",
    "sydney": "oceania", "melbourne": "oceania", "brisbane": "oceania", "perth": "oceania",
    "auckland": "oceania",
    # Middle East
    "dubai": "middle_east", "abu dhabi": "middle_east",
    # Latin America
    "mexico city": "latin_america", "sao paulo": "latin_america", "buenos aires": "latin_america",
    "bogota": "latin_america", "santiago": "latin_america", "lima": "latin_america",
    # Africa
    "cape town": "africa", "johannesburg": "africa", "nairobi": "africa", "kampala": "africa",
    "cairo": "africa", "casablanca": "africa", "rabat": "africa", "marrakech": "africa",
}


def supported_cities() -> list[str]:
    return sorted(CITY_REGIONS)


def region_for_city(city: Optional[str]) -> Optional[str]:
    """Map a known city (case-insensitive, exact) to its region key."""
    if not city:
        return None
    return CITY_REGIONS.get(city.strip().lower())


def filter_by_location(items: Iterable[NewsItem], city: Optional[str] = None) -> list[NewsItem]:
    """
    Select items visible to a reader in the given city.

    International items are always included. Regional items are included
    when their region matches the city's region; local items when the city
    is one of their declared cities. Without a known city only international
    items are returned.

    Args:
        items: Corpus, in display order
        city: Optional city name

    Returns:
        Filtered items, order preserved
    """
    city_key = city.strip().lower() if city else None
    region = region_for_city(city_key)

    selected = []
    for item in items:
        if item.scope == SCOPE_INTERNATIONAL:
            selected.append(item)
        elif item.scope == SCOPE_REGIONAL and region is not None and item.region == region:
            selected.append(item)
        elif item.scope == SCOPE_LOCAL and region is not None and city_key in item.cities:
            selected.append(item)
    return selected
