# interfaces/travel_type_registry.py
"""
Travel Type Registry
Static table of the 16 travel personalities:
- Name, emoji, descriptions
- Google Places types and search query variants
- Persona system prompt (generated once at import)

The table is read-only; callers only get lookup accessors.
"""

from dataclasses import dataclass, field, asdict, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from loguru import logger

from ..exceptions import UnknownTravelTypeError

TRAVEL_TYPE_CODES: Tuple[str, ...] = (
    "GRLP", "GRLF", "GRHP", "GRHF",
    "GDHP", "GDHF", "GDLP", "GDLF",
    "SRLP", "SRLF", "SRHP", "SRHF",
    "SDHP", "SDHF", "SDLP", "SDLF",
)


@dataclass(frozen=True)
class TravelTypeInfo:
    """Immutable metadata for one travel type"""
    code: str
    name: str
    emoji: str
    description: str
    short_description: str
    recommended_types: Tuple[str, ...]
    keywords: Tuple[str, ...]
    search_query_template: str
    search_query_variants: Tuple[str, ...]
    personality_prompt: str
    system_prompt: str = field(default="", repr=False)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("recommended_types", "keywords", "search_query_variants"):
            data[key] = list(data[key])
        return data


def generate_system_prompt(info: TravelTypeInfo) -> str:
    """
    Build the persona system prompt for a travel type

    Deterministic: the same entry always yields the same prompt.
    """
    tone_keywords = ", ".join(info.keywords[:3]) or "calm, clear"
    profile_line = f"{info.name} {info.emoji}"

    return "\n\n".join([
        "You are an AI travel partner for travelers exploring their current location.",
        f"Persona: {profile_line} — {info.short_description}.",
        f"Voice: {tone_keywords}; concise, friendly, action-first.",
        "Always read CONVERSATION_SUMMARY and CONTEXT_JSON first and obey constraints there.",
        "Dialogue contract: answer the latest user intent, keep the thread, and avoid resetting context.",
        "Tools: search_places for new options near the user (default ~500m, extend only when the user widens it); "
        "get_place_details for specifics about a known place_id. Use tools only when they add facts; "
        "otherwise respond immediately.",
        "Format: short paragraphs; bullet list options are welcome. Include distances/times when available.",
    ])


# ============================================
# Type Table
# ============================================

_TRAVEL_TYPE_TABLE: Tuple[TravelTypeInfo, ...] = (
    TravelTypeInfo(
        code="GRLP",
        name="The Itinerary CEO",
        emoji="📍",
        description=(
            "Travel is a spreadsheet. Zero waste, maximum city domination. Lives for optimized schedules "
            "and clever logistics, loves keeping everyone on track and happy, and prefers structured, "
            "efficient multi-stop adventures. Ideal day: Morning strategy session, curated group "
            "experiences, perfectly timed sunset viewpoint."
        ),
        short_description="Plans never falter, even with friends in tow",
        recommended_types=("tourist_attraction", "point_of_interest", "restaurant", "cafe", "shopping_mall"),
        keywords=("efficient", "planned", "group", "social", "organized"),
        search_query_template="popular tourist attractions landmarks restaurants cafes shopping malls",
        search_query_variants=(
            "popular landmarks attractions",
            "restaurants cafes dining",
            "shopping malls stores",
            "tourist spots viewpoints",
            "group activities experiences",
        ),
        personality_prompt=(
            "This traveler is highly organized, enjoys planning detailed itineraries, values efficiency "
            "and punctuality. They prefer structured experiences with clear schedules. They work well in "
            "groups and like to ensure everyone has a good time through careful planning."
        ),
    ),
    TravelTypeInfo(
        code="GRLF",
        name="The Chaos Explorer",
        emoji="⚡",
        description=(
            "No plan? No problem. Alleys and intuition are the guide. Thrives on spontaneous discoveries, "
            "loves vibrant environments with social energy, and chases neon lights, street food, and "
            "last-minute adventures. Ideal day: Late start, backstreet wanderings, random pop-up events, "
            "night market crawl."
        ),
        short_description="Head out and turn into promising alleys",
        recommended_types=("point_of_interest", "tourist_attraction", "park", "natural_feature", "cafe"),
        keywords=("spontaneous", "explore", "adventure", "unplanned", "discovery"),
        search_query_template="hidden alleys local spots street food unique cafes parks",
        search_query_variants=(
            "hidden alleys local spots",
            "street food vendors",
            "unique cafes restaurants",
            "parks gardens nature",
            "spontaneous discoveries",
        ),
        personality_prompt=(
            "This traveler thrives on spontaneity and unexpected discoveries. They prefer unplanned "
            "adventures and are energized by the chaos of exploration. They enjoy social experiences but "
            "value flexibility and the freedom to change plans instantly."
        ),
    ),
    TravelTypeInfo(
        code="GRHP",
        name="The Memory Host",
        emoji="🎈",
        description=(
            "The goal is everyone's smiles. Photos are just a bonus. Plans around group happiness and "
            "shared memories, blends structured fun with photogenic moments, and captures core memories "
            "through thoughtful scheduling. Ideal day: Cafe meet-ups, group workshops, themed dinner, "
            "golden-hour photo walk."
        ),
        short_description="Success is when everyone says they had fun",
        recommended_types=("tourist_attraction", "point_of_interest", "park", "amusement_park", "restaurant"),
        keywords=("memories", "social", "group", "fun", "photography"),
        search_query_template="fun group activities amusement parks photo spots restaurants parks",
        search_query_variants=(
            "fun group activities",
            "amusement parks entertainment",
            "photo spots scenic views",
            "restaurants cafes dining",
            "parks gardens outdoor",
        ),
        personality_prompt=(
            "This traveler prioritizes creating shared experiences and memories with friends. They are "
            "highly social, enjoy group activities, and value emotional connections. They prefer "
            "experiences that bring people together and create lasting memories."
        ),
    ),
    TravelTypeInfo(
        code="GRHF",
        name="The Main-Character Tourist",
        emoji="🎉",
        description=(
            "Main character energy lights up the city, and nights are usually dramatic. Loves "
            "high-energy, spotlight-worthy experiences, thrives in crowds and statement moments, and "
            "makes every scene feel cinematic. Ideal day: Mid-morning glam brunch, daytime pop-ups, "
            "rooftop sunset, iconic nightlife hopping."
        ),
        short_description="High energy on location, doors open with vibes",
        recommended_types=("night_club", "bar", "amusement_park", "tourist_attraction", "restaurant"),
        keywords=("vibrant", "social", "nightlife", "entertainment", "energy"),
        search_query_template="nightlife bars clubs entertainment vibrant spots restaurants",
        search_query_variants=(
            "nightlife bars clubs",
            "entertainment venues",
            "vibrant restaurants",
            "rooftop bars views",
            "live music events",
        ),
        personality_prompt=(
            "This traveler embraces their role as the protagonist of their travel story. They are highly "
            "social, energetic, and enjoy being the center of attention. They prefer vibrant, exciting "
            "experiences and spontaneous moments that feel cinematic."
        ),
    ),
    TravelTypeInfo(
        code="GDHP",
        name="The Trip Director",
        emoji="🎬",
        description=(
            "Every trip has a theme, and even the afterglow is curated. Curates experiences like "
            "cinematic chapters, balances meaningful depth with group-friendly pacing, and creates "
            "rituals with symbolic bookends. Ideal day: Themed walking tour, show-stopping exhibit, "
            "craft cocktail night with debrief journaling."
        ),
        short_description="Edits wishes into one cohesive story",
        recommended_types=("tourist_attraction", "museum", "art_gallery", "point_of_interest", "spa"),
        keywords=("storytelling", "themed", "cultural", "meaningful", "curated"),
        search_query_template="museums art galleries cultural sites themed experiences spas",
        search_query_variants=(
            "museums cultural sites",
            "art galleries exhibitions",
            "themed experiences tours",
            "spas wellness centers",
            "historical landmarks",
        ),
        personality_prompt=(
            "This traveler approaches trips as curated narratives with themes and emotional arcs. They "
            "value meaningful, story-driven experiences and enjoy planning trips that have deeper "
            "significance. They prefer cultural and artistic experiences that tell a story."
        ),
    ),
    TravelTypeInfo(
        code="GDHF",
        name="The Serendipity Chaser",
        emoji="✨",
        description=(
            "One reservation, then let the universe take over. Sets a poetic tone before following the "
            "vibes, collects meaningful coincidences and narrative moments, and prefers flexible flow "
            "with soulful stops. Ideal day: Gentle start, hidden cafes, street performances, twilight "
            "stroll through lantern-lit alleys."
        ),
        short_description="Detours are a talent. Serendipitous encounters are the reward",
        recommended_types=("point_of_interest", "tourist_attraction", "art_gallery", "park", "cafe"),
        keywords=("serendipity", "spontaneous", "discovery", "unexpected", "flow"),
        search_query_template="serendipitous discoveries art galleries cafes parks hidden gems",
        search_query_variants=(
            "hidden gems discoveries",
            "art galleries exhibitions",
            "cozy cafes restaurants",
            "parks gardens nature",
            "serendipitous spots",
        ),
        personality_prompt=(
            "This traveler seeks meaningful coincidences and unexpected discoveries. They balance "
            "spontaneity with a desire for deeper experiences. They enjoy going with the flow while "
            "remaining open to the stories and meanings behind places they encounter."
        ),
    ),
    TravelTypeInfo(
        code="GDLP",
        name="The City Strategist",
        emoji="🧠",
        description=(
            "Cities are systems to understand from above and optimize along the way. Maps journeys like "
            "urban puzzles, focuses on architecture and infrastructure, and keeps time and movement "
            "elegantly tuned. Ideal day: Observation deck analysis, urban planning exhibit, multi-modal "
            "transit exploration."
        ),
        short_description="Designs routes that reveal the city, reverse-engineering movement",
        recommended_types=("tourist_attraction", "museum", "library", "point_of_interest", "shopping_mall"),
        keywords=("systematic", "urban", "strategic", "efficient", "analytical"),
        search_query_template="museums libraries urban planning centers shopping malls efficient routes",
        search_query_variants=(
            "museums libraries",
            "urban planning centers",
            "shopping malls stores",
            "observation decks viewpoints",
            "transportation hubs",
        ),
        personality_prompt=(
            "This traveler approaches cities as systems to understand and optimize. They enjoy "
            "strategic planning and finding the most efficient ways to experience a place. They value "
            "intellectual understanding and prefer structured, analytical approaches to travel."
        ),
    ),
    TravelTypeInfo(
        code="GDLF",
        name="The Glitch Hunter",
        emoji="🧪",
        description=(
            "Bugs over mainstream, always grinning at niche finds. Seeks oddities, subcultures, and "
            "fringe art, loves hidden basements, rare shops, and off-kilter cafes, and collects "
            "you-had-to-be-there stories. Ideal day: Vintage arcade raid, experimental gallery, midnight "
            "vending machine safari."
        ),
        short_description="Drawn to zones not found in guides",
        recommended_types=("establishment", "store", "point_of_interest", "art_gallery", "tourist_attraction"),
        keywords=("niche", "hidden", "unique", "offbeat", "exploration"),
        search_query_template="niche shops unique stores offbeat places hidden galleries",
        search_query_variants=(
            "niche shops stores",
            "unique establishments",
            "offbeat places",
            "hidden galleries",
            "vintage arcades",
        ),
        personality_prompt=(
            "This traveler actively seeks out unusual, offbeat, and niche experiences that others miss. "
            "They enjoy finding hidden gems and quirky spots that aren't in guidebooks. They value "
            "uniqueness and authenticity over mainstream attractions."
        ),
    ),
    TravelTypeInfo(
        code="SRLP",
        name="The Ritual Traveler",
        emoji="🗂",
        description=(
            "Refine the classics and update last year's plan. Enjoys quiet refinement and repeat "
            "visits, finds calm in familiar kissaten and parks, and plans softly with room for nostalgic "
            "returns. Ideal day: Morning kissaten, curated bookstore browsing, sunset at a favorite park "
            "bench."
        ),
        short_description="Research quietly, move calmly. Precision increases with each visit",
        recommended_types=("cafe", "park", "tourist_attraction", "library", "museum"),
        keywords=("routine", "refined", "quiet", "familiar", "comfortable"),
        search_query_template="quiet cafes peaceful parks libraries refined museums",
        search_query_variants=(
            "quiet cafes kissaten",
            "peaceful parks gardens",
            "libraries bookstores",
            "refined museums",
            "comfortable spaces",
        ),
        personality_prompt=(
            "This traveler values familiar routines and refined experiences. They prefer quiet, "
            "well-researched places and enjoy returning to favorites. They appreciate comfort and "
            "predictability, finding joy in perfecting their approach to familiar destinations."
        ),
    ),
    TravelTypeInfo(
        code="SRLF",
        name="The Silent Pathfinder",
        emoji="🗺",
        description=(
            "Silent navigator whose crowd avoidance is instinct. Loves hushed backstreets and riverside "
            "walks, moves efficiently while observing everything quietly, and finds flow in solitude and "
            "soft light. Ideal day: Sunrise stroll, hidden garden lunches, evening tram ride with "
            "headphones."
        ),
        short_description="Quiet but sees the optimal route",
        recommended_types=("park", "natural_feature", "point_of_interest", "tourist_attraction", "cafe"),
        keywords=("quiet", "solitary", "efficient", "peaceful", "navigation"),
        search_query_template="quiet parks natural areas peaceful cafes scenic spots",
        search_query_variants=(
            "quiet parks nature",
            "natural areas gardens",
            "peaceful cafes",
            "scenic spots viewpoints",
            "riverside walks",
        ),
        personality_prompt=(
            "This traveler prefers solitude and quiet exploration. They have an intuitive sense of "
            "direction and enjoy finding the most efficient, peaceful routes. They value quiet time and "
            "natural settings, avoiding crowds and noise."
        ),
    ),
    TravelTypeInfo(
        code="SRHP",
        name="The Comfort Curator",
        emoji="🫧",
        description=(
            "Comfort and gentleness always come first. Designs cozy, sensory-friendly itineraries, "
            "focuses on wellness, soft textures, and human warmth, and creates calm for themselves and "
            "loved ones. Ideal day: Slow brunch, restorative spa visit, low-key evening tea ceremony."
        ),
        short_description="Small, peaceful journeys feel right",
        recommended_types=("spa", "beauty_salon", "park", "cafe", "tourist_attraction"),
        keywords=("comfort", "gentle", "peaceful", "wellness", "relaxing"),
        search_query_template="spas wellness centers peaceful cafes gentle experiences parks",
        search_query_variants=(
            "spas wellness centers",
            "peaceful cafes",
            "gentle experiences",
            "parks gardens",
            "relaxing spaces",
        ),
        personality_prompt=(
            "This traveler prioritizes comfort, wellness, and gentle experiences. They value peaceful, "
            "calming environments and care about the well-being of themselves and others. They prefer "
            "low-key, cozy experiences over excitement."
        ),
    ),
    TravelTypeInfo(
        code="SRHF",
        name="The Aesthetic Nomad",
        emoji="🎨",
        description=(
            "Choose places by light and sound, falling for quiet beauty every time. Chases delicate "
            "angles, subtle design, and harmonious soundscapes, prefers curated art experiences with "
            "gentle atmospheres, and documents soft, beautiful moments. Ideal day: Gallery hop, "
            "handcrafted dessert salon, golden-hour photography walk."
        ),
        short_description='My "good" over trending. Falling for subtle beauty',
        recommended_types=("art_gallery", "museum", "park", "natural_feature", "tourist_attraction"),
        keywords=("aesthetic", "beauty", "visual", "artistic", "sensory"),
        search_query_template="art galleries museums aesthetic spots beautiful parks scenic views",
        search_query_variants=(
            "art galleries exhibitions",
            "museums cultural sites",
            "aesthetic spots cafes",
            "beautiful parks gardens",
            "scenic views viewpoints",
        ),
        personality_prompt=(
            "This traveler is highly attuned to aesthetics, beauty, and sensory details. They enjoy "
            "quiet, visually pleasing experiences and value artistic and natural beauty. They prefer "
            "peaceful environments where they can appreciate subtle details and create meaningful "
            "memories."
        ),
    ),
    TravelTypeInfo(
        code="SDHP",
        name="The Soul Search Passenger",
        emoji="🌌",
        description=(
            "Travel is a self-conference where scenery provides the answers. Reflects deeply through "
            "vistas and night skies, finds insights in observation decks and sea breezes, and enjoys "
            "solo wandering followed by journaling. Ideal day: Morning rooftop solitude, contemplative "
            "museum visit, night view over the city."
        ),
        short_description="Introspection deepens at viewpoints and beaches",
        recommended_types=("park", "natural_feature", "tourist_attraction", "museum", "art_gallery"),
        keywords=("introspective", "reflective", "meaningful", "contemplative", "deep"),
        search_query_template="peaceful parks viewpoints museums contemplative spaces",
        search_query_variants=(
            "peaceful parks nature",
            "viewpoints observation decks",
            "museums galleries",
            "contemplative spaces",
            "quiet cafes",
        ),
        personality_prompt=(
            "This traveler uses travel as a form of introspection and self-discovery. They value quiet, "
            "meaningful experiences that allow for reflection and contemplation. They prefer places that "
            "inspire deep thinking and emotional connection."
        ),
    ),
    TravelTypeInfo(
        code="SDHF",
        name="The Soft Daydreamer",
        emoji="📖",
        description=(
            "Half reality, half the movie in your head. Collects narratives from bookshops and quaint "
            "cafes, loves cinematic rain scenes and whispered conversations, and moves through days like "
            "a gentle film sequence. Ideal day: Rainy cafe journaling, storytelling exhibits, twilight "
            "bookstore wandering."
        ),
        short_description="Travels collecting stories in bookshops and cafes",
        recommended_types=("library", "cafe", "book_store", "art_gallery", "tourist_attraction"),
        keywords=("dreamy", "imaginative", "literary", "contemplative", "story"),
        search_query_template="bookstores libraries cozy cafes literary spots art galleries",
        search_query_variants=(
            "bookstores libraries",
            "cozy cafes kissaten",
            "literary spots",
            "art galleries exhibitions",
            "storytelling spaces",
        ),
        personality_prompt=(
            "This traveler lives partially in their imagination, finding stories and meaning in everyday "
            "places. They enjoy literary and artistic experiences, preferring cozy, contemplative spaces "
            "where they can daydream and connect with narratives. They value emotional and imaginative "
            "experiences over action."
        ),
    ),
    TravelTypeInfo(
        code="SDLP",
        name="The System Architect",
        emoji="🛰",
        description=(
            "Wants to see the structure beneath the scenery. Breaks down cities into layers and flows, "
            "enjoys transport hubs, observatories, and knowledge centers, and balances analysis with "
            "contemplative pauses. Ideal day: Transit museum, guided infrastructure tour, sunset notes "
            "overlooking rail lines."
        ),
        short_description="Hobby: designing routes with minimal movement, maximum understanding",
        recommended_types=("museum", "library", "tourist_attraction", "point_of_interest", "art_gallery"),
        keywords=("systematic", "analytical", "structured", "intellectual", "deep"),
        search_query_template="museums libraries architectural sites educational centers",
        search_query_variants=(
            "museums libraries",
            "architectural sites",
            "educational centers",
            "observation decks",
            "transportation museums",
        ),
        personality_prompt=(
            "This traveler seeks deep understanding of systems, structures, and underlying patterns. "
            "They enjoy intellectual exploration and prefer structured, analytical approaches to travel. "
            "They value efficiency and meaningful learning over casual experiences."
        ),
    ),
    TravelTypeInfo(
        code="SDLF",
        name="The Rabbit-Hole Nomad",
        emoji="🧩",
        description=(
            "Researcher who falls down rabbit holes from a single sign. Follows curiosity into niche "
            "worlds, loves discount bookstores, archives, and secret societies, and can spend hours "
            "decoding one mysterious clue. Ideal day: Archive pass, specialty museum, midnight research "
            "cafe session."
        ),
        short_description="Few photos but tabs multiply. Detours are justice",
        recommended_types=("museum", "art_gallery", "establishment", "point_of_interest", "tourist_attraction"),
        keywords=("research", "deep-dive", "curious", "exploratory", "detailed"),
        search_query_template="museums art galleries research centers unique establishments",
        search_query_variants=(
            "museums exhibitions",
            "art galleries cultural",
            "research centers archives",
            "unique establishments",
            "specialty bookstores",
        ),
        personality_prompt=(
            "This traveler is driven by intense curiosity and a desire to dive deep into mysteries and "
            "details. They enjoy spontaneous exploration that leads to unexpected discoveries and "
            "learning. They value the journey of discovery itself, often getting lost in research and "
            "investigation."
        ),
    ),
)


def _build_registry(table: Tuple[TravelTypeInfo, ...]) -> Mapping[str, TravelTypeInfo]:
    entries = {info.code: replace(info, system_prompt=generate_system_prompt(info)) for info in table}
    missing = set(TRAVEL_TYPE_CODES) - set(entries)
    if missing:
        raise RuntimeError(f"Travel type table is missing codes: {sorted(missing)}")
    return MappingProxyType(entries)


class TravelTypeRegistry:
    """
    Read-only lookup over the 16 travel types.

    Usage:
        registry = TravelTypeRegistry()
        if registry.is_valid("GDLF"):
            prompt = registry.get_system_prompt("GDLF")
    """

    def __init__(self, table: Tuple[TravelTypeInfo, ...] = _TRAVEL_TYPE_TABLE):
        self._types = _build_registry(table)
        logger.debug(f"TravelTypeRegistry loaded {len(self._types)} types")

    @property
    def types(self) -> Mapping[str, TravelTypeInfo]:
        return self._types

    def is_valid(self, code: Any) -> bool:
        """Exact, case-sensitive membership test"""
        return isinstance(code, str) and code in self._types

    def get(self, code: str) -> TravelTypeInfo:
        if not self.is_valid(code):
            raise UnknownTravelTypeError(code)
        return self._types[code]

    def get_system_prompt(self, code: str) -> str:
        return self.get(code).system_prompt

    def get_search_query_variants(self, code: str) -> List[str]:
        info = self.get(code)
        return list(info.search_query_variants or (info.search_query_template,))

    def get_recommended_types(self, code: str) -> List[str]:
        return list(self.get(code).recommended_types)

    def get_search_query_template(self, code: str) -> str:
        return self.get(code).search_query_template

    def list_types(self) -> List[TravelTypeInfo]:
        """All types in canonical code order"""
        return [self._types[code] for code in TRAVEL_TYPE_CODES]


# ============================================
# Global Instance
# ============================================

travel_type_registry = TravelTypeRegistry()


# ============================================
# Convenience Functions
# ============================================

def is_valid_travel_type_code(code: Any) -> bool:
    """True only for an exact match of one of the 16 codes"""
    return travel_type_registry.is_valid(code)


def get_travel_type_info(code: str) -> TravelTypeInfo:
    """Get type metadata; raises UnknownTravelTypeError for invalid codes"""
    return travel_type_registry.get(code)


def get_system_prompt_for_travel_type(code: str) -> str:
    """Get the generated persona system prompt"""
    return travel_type_registry.get_system_prompt(code)


def get_search_query_variants(code: str) -> List[str]:
    """Get search query variants (falls back to the single template)"""
    return travel_type_registry.get_search_query_variants(code)


def get_types_for_travel_type(code: str) -> List[str]:
    """Get Google Places types for a travel type"""
    return travel_type_registry.get_recommended_types(code)


def get_search_query_template(code: str) -> str:
    """Get the single combined search query"""
    return travel_type_registry.get_search_query_template(code)


def list_travel_types() -> List[TravelTypeInfo]:
    """Get every travel type in canonical order"""
    return travel_type_registry.list_types()
