"""
cityweaver.enrichment.catalog

Static travel-style reference data offered to users for selection.
"""

from __future__ import annotations

from collections.abc import Iterable

from cityweaver.domain.models import StyleSelection

TRAVEL_STYLES: tuple[StyleSelection, ...] = (
    StyleSelection(
        id="urban-explorer",
        name="Urban Explorer",
        description="Discover hidden gems, street art, and local neighborhoods off the beaten path",
        icon="\U0001f5fa️",
        examples=("Street art tours", "Local markets", "Rooftop bars", "Walking neighborhoods"),
    ),
    StyleSelection(
        id="foodies-quest",
        name="Foodie's Quest",
        description="Savor authentic cuisine, food markets, and culinary experiences",
        icon="\U0001f35c",
        examples=("Food tours", "Local eateries", "Cooking classes", "Night markets"),
    ),
    StyleSelection(
        id="history-buff",
        name="History Buff",
        description="Immerse in museums, historical sites, and cultural heritage",
        icon="\U0001f3db️",
        examples=("Museums", "Historical sites", "Cultural districts", "Architecture tours"),
    ),
    StyleSelection(
        id="nature-seeker",
        name="Nature Seeker",
        description="Find parks, gardens, waterfronts, and natural escapes within the city",
        icon="\U0001f33f",
        examples=("City parks", "Botanical gardens", "Waterfront walks", "Nature reserves"),
    ),
    StyleSelection(
        id="adventure-thrill",
        name="Adventure & Thrill",
        description="Seek exciting activities, adventure sports, and adrenaline experiences",
        icon="⚡",
        examples=("Adventure sports", "Unique experiences", "Active pursuits", "Thrill activities"),
    ),
    StyleSelection(
        id="culture-arts",
        name="Culture & Arts",
        description="Explore galleries, theaters, music venues, and artistic expressions",
        icon="\U0001f3ad",
        examples=("Art galleries", "Live music", "Theater shows", "Creative districts"),
    ),
    StyleSelection(
        id="nightlife-social",
        name="Nightlife & Social",
        description="Experience vibrant nightlife, bars, clubs, and social hotspots",
        icon="\U0001f303",
        examples=("Rooftop bars", "Live music venues", "Social districts", "Night markets"),
    ),
    StyleSelection(
        id="family-friendly",
        name="Family Friendly",
        description="Kid-friendly attractions, family activities, and safe, enjoyable spots",
        icon="\U0001f46a",
        examples=("Family attractions", "Playgrounds", "Interactive museums", "Safe neighborhoods"),
    ),
    StyleSelection(
        id="budget-conscious",
        name="Budget Conscious",
        description="Free activities, budget-friendly spots, and maximum value experiences",
        icon="\U0001f4b0",
        examples=("Free museums", "Public parks", "Walking tours", "Budget eats"),
    ),
    StyleSelection(
        id="luxury-comfort",
        name="Luxury & Comfort",
        description="Premium experiences, upscale venues, and comfortable, refined activities",
        icon="✨",
        examples=("Fine dining", "Luxury shopping", "Spa experiences", "Premium venues"),
    ),
    StyleSelection(
        id="photography-scenic",
        name="Photography & Scenic",
        description="Instagram-worthy spots, scenic viewpoints, and photogenic locations",
        icon="\U0001f4f8",
        examples=(
            "Scenic viewpoints",
            "Photo spots",
            "Golden hour locations",
            "Architectural gems",
        ),
    ),
    StyleSelection(
        id="local-authentic",
        name="Local & Authentic",
        description="Experience the city like a local with authentic, non-touristy experiences",
        icon="\U0001f3e0",
        examples=("Local hangouts", "Neighborhood cafes", "Community events", "Resident favorites"),
    ),
)

_BY_ID = {s.id: s for s in TRAVEL_STYLES}


def get_style(style_id: str) -> StyleSelection | None:
    return _BY_ID.get(style_id)


def get_styles(style_ids: Iterable[str]) -> list[StyleSelection]:
    # Unknown ids are skipped; order follows the request.
    return [s for s in map(get_style, style_ids) if s is not None]
