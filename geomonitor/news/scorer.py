"""Keyword-based relevance scoring and region detection for news items.

Every function here is a pure function of the item text and the static
tables below; re-scoring the same text always yields the same result.
"""

from typing import Iterable

from ..utils.matching import first_match, matching_keywords, union_matches

HIGH_WEIGHT = 3.0
MEDIUM_WEIGHT = 1.5
LOW_WEIGHT = 0.5
MAX_SCORE = 10.0

MARKET_KEYWORDS = {
    "high": (
        "sanctions", "tariff", "trade war", "central bank", "interest rate", "fed", "ecb",
        "inflation", "gdp", "recession", "default", "debt ceiling", "fiscal", "monetary",
        "opec", "oil price", "gas price", "commodity", "currency", "devaluation",
        "war", "conflict", "invasion", "military", "nuclear", "attack",
        "election", "coup", "regime", "government collapse", "political crisis",
        "supply chain", "shortage", "embargo", "blockade", "export ban",
        "tech ban", "chip", "semiconductor", "rare earth", "critical minerals",
    ),
    "medium": (
        "policy", "regulation", "legislation", "bill", "law", "treaty",
        "summit", "negotiation", "diplomatic", "alliance", "partnership",
        "investment", "acquisition", "merger", "ipo", "earnings",
        "unemployment", "jobs", "manufacturing", "industrial", "production",
        "protest", "strike", "unrest", "demonstration", "riot",
    ),
    "low": (
        "statement", "comment", "speech", "interview", "report", "analysis",
        "meeting", "visit", "ceremony", "anniversary", "commemoration",
    ),
}

TIER_WEIGHTS = {"high": HIGH_WEIGHT, "medium": MEDIUM_WEIGHT, "low": LOW_WEIGHT}

# Region key -> exposed instruments / market tags
REGION_EXPOSURE = {
    "china": ("FXI", "KWEB", "BABA", "copper", "CNY", "semiconductors", "rare earth"),
    "russia": ("RSX", "oil", "gas", "wheat", "RUB", "palladium", "nickel"),
    "ukraine": ("wheat", "corn", "sunflower", "neon", "European defense"),
    "middle east": ("oil", "XLE", "defense", "gold", "safe havens"),
    "iran": ("oil", "shipping", "defense", "gold"),
    "taiwan": ("semiconductors", "TSM", "INTC", "NVDA", "AMD", "tech supply chain"),
    "europe": ("EUR", "DAX", "gas", "EWG", "European banks"),
    "japan": ("JPY", "EWJ", "JGB", "auto", "electronics"),
    "india": ("INDA", "INR", "pharmaceuticals", "IT services"),
    "brazil": ("EWZ", "BRL", "soybeans", "iron ore", "coffee"),
    "mexico": ("EWW", "MXN", "nearshoring", "auto manufacturing"),
    "saudi arabia": ("oil", "OPEC", "KSA", "petrodollar"),
    "united states": ("SPY", "USD", "treasuries", "tech", "defense"),
    "united kingdom": ("GBP", "EWU", "gilts", "financial services"),
}

# Aliases (demonyms, capitals, leaders) -> canonical region key
REGION_ALIASES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("chinese", "beijing", "xi jinping"), "china"),
    (("russian", "moscow", "putin", "kremlin"), "russia"),
    (("ukrain", "kyiv", "zelensky"), "ukraine"),
    (("iranian", "tehran"), "iran"),
    (("taiwanese", "taipei"), "taiwan"),
    (("japanese", "tokyo"), "japan"),
    (("indian", "delhi", "modi"), "india"),
    (("brazilian", "brasilia", "lula"), "brazil"),
    (("mexican",), "mexico"),
    (("saudi", "riyadh"), "saudi arabia"),
    (("german", "berlin", "france", "french", "paris", "brussels", "european union"), "europe"),
    (("israel", "gaza", "hezbollah", "houthi"), "middle east"),
    (("u.s.", "washington", "white house"), "united states"),
    (("britain", "british", "london"), "united kingdom"),
)

# Ordered keyword -> causal chain; first match in declaration order wins
TRANSMISSION_CHANNELS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("sanctions",), "Policy -> Trade Restriction -> Supply -> Pricing"),
    (("tariff",), "Policy -> Trade Cost -> Import Price -> Consumer Price"),
    (("interest rate",), "Monetary Policy -> Credit Cost -> Investment -> Growth"),
    (("central bank",), "Monetary Policy -> Currency -> Competitiveness -> Trade"),
    (("war",), "Conflict -> Supply Disruption -> Commodity Price -> Inflation"),
    (("conflict",), "Conflict -> Risk Premium -> Safe Haven Flows -> Asset Reallocation"),
    (("election",), "Political Change -> Policy Uncertainty -> Market Volatility"),
    (("supply chain",), "Disruption -> Shortage -> Price Spike -> Margin Compression"),
    (("oil",), "Energy Price -> Input Cost -> Transportation -> Broad Inflation"),
    (("semiconductor",), "Tech Supply -> Production Bottleneck -> Sector Impact -> Tech Valuations"),
)
DEFAULT_TRANSMISSION_CHANNEL = "Information -> Sentiment -> Positioning -> Price"

# Checked in priority order: confirmed, building, early
SIGNAL_STRENGTH_PATTERNS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("announced", "confirmed", "signed", "enacted", "passed", "approved", "invaded", "attacked"),
        "confirmed",
    ),
    (
        ("considering", "planning", "expected to", "likely to", "preparing", "negotiating", "talks"),
        "building",
    ),
    (
        ("may", "could", "might", "rumor", "speculation", "sources say", "reportedly"),
        "early",
    ),
)
DEFAULT_SIGNAL_STRENGTH = "building"

WHY_IT_MATTERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("sanction",), "Sanctions affect trade flows, currency valuations, and commodity supply chains"),
    (("tariff", "trade war"), "Trade restrictions impact import costs, corporate margins, and consumer prices"),
    (
        ("interest rate", "central bank", "fed "),
        "Monetary policy shifts affect currency strength, borrowing costs, and equity valuations",
    ),
    (("war", "conflict", "military"), "Military developments drive risk premiums, commodity prices, and safe-haven flows"),
    (
        ("election", "vote"),
        "Electoral outcomes can shift policy direction, regulatory environment, and market sentiment",
    ),
    (("oil", "opec", "energy"), "Energy prices are a key input cost affecting inflation and corporate margins globally"),
    (
        ("semiconductor", "chip"),
        "Semiconductor supply affects technology sector, auto industry, and manufacturing capacity",
    ),
    (("supply chain",), "Supply disruptions lead to shortages, price increases, and production delays"),
)
HIGH_SCORE_RATIONALE = "Developments in this area historically correlate with market volatility and sector rotation"
DEFAULT_RATIONALE = "Monitor for second-order effects on related markets"

NOVELTY_MIN_TOKEN_LENGTH = 5
NOVELTY_OVERLAP_THRESHOLD = 0.6


def score_relevance(title: str, summary: str = "") -> float:
    """
    Score market relevance of an item's text.

    Every keyword found in a tier adds that tier's weight once; the total is
    capped at MAX_SCORE.

    Args:
        title: Item title
        summary: Item summary or content snippet

    Returns:
        Relevance score in [0, 10]
    """
    text = f"{title} {summary}"
    score = 0.0
    for tier, keywords in MARKET_KEYWORDS.items():
        score += TIER_WEIGHTS[tier] * len(matching_keywords(text, keywords))
    return min(score, MAX_SCORE)


def detect_regions(text: str) -> list[str]:
    """Return canonical region keys referenced in text, deduplicated."""
    regions = matching_keywords(text, REGION_EXPOSURE)
    for region in union_matches(text, REGION_ALIASES):
        if region not in regions:
            regions.append(region)
    return regions


def exposed_markets(regions: Iterable[str]) -> list[str]:
    """Union of instrument tags for the given regions, first-seen order."""
    markets: list[str] = []
    for region in regions:
        for market in REGION_EXPOSURE.get(region, ()):
            if market not in markets:
                markets.append(market)
    return markets


def transmission_channel(text: str) -> str:
    return first_match(text, TRANSMISSION_CHANNELS) or DEFAULT_TRANSMISSION_CHANNEL


def classify_signal_strength(text: str) -> str:
    """Classify as confirmed, building or early; first pattern class wins."""
    return first_match(text, SIGNAL_STRENGTH_PATTERNS) or DEFAULT_SIGNAL_STRENGTH


def why_it_matters(text: str, score: float) -> str:
    """Pick a short market rationale for the item."""
    rationale = first_match(text, WHY_IT_MATTERS)
    if rationale:
        return rationale
    if score > 3:
        return HIGH_SCORE_RATIONALE
    return DEFAULT_RATIONALE


def _title_tokens(title: str) -> list[str]:
    return [w for w in title.lower().split(" ") if len(w) >= NOVELTY_MIN_TOKEN_LENGTH]


def is_novel(title: str, accepted_titles: Iterable[str]) -> bool:
    """
    Check whether a title carries new information.

    A title is a repetition when more than 60% of its long tokens appear in
    any previously accepted title. Titles without long tokens are novel.

    Args:
        title: Candidate title
        accepted_titles: Titles already accepted this cycle, in order

    Returns:
        True if the title is novel
    """
    tokens = _title_tokens(title)
    if not tokens:
        return True

    for existing in accepted_titles:
        existing_tokens = set(_title_tokens(existing))
        overlap = sum(1 for t in tokens if t in existing_tokens)
        if overlap / len(tokens) > NOVELTY_OVERLAP_THRESHOLD:
            return False
    return True
