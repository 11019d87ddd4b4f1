"""Theme predicates shared by narrative clustering and the summary."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ThemeRule:
    """
    Substring predicate over lower-cased item text.

    Matches when any keyword in any_of is present and, if anchor is set,
    the anchor is present as well.
    """

    name: str
    any_of: tuple[str, ...]
    anchor: Optional[str] = None

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        if self.anchor and self.anchor not in lowered:
            return False
        return any(kw in lowered for kw in self.any_of)


OTHER_DEVELOPMENTS = "Other Developments"

# Ordered: an item lands in the first rule that matches
NARRATIVE_RULES = (
    ThemeRule("US-China Relations", ("us", "america", "tariff", "trade"), anchor="china"),
    ThemeRule("Russia-Ukraine Conflict", ("russia", "ukraine", "putin", "kyiv")),
    ThemeRule("Middle East Tensions", ("israel", "iran", "saudi", "gaza", "houthi")),
    ThemeRule("Central Bank Policy", ("fed ", "ecb", "central bank", "interest rate", "monetary")),
    ThemeRule("Trade & Tariffs", ("tariff", "trade", "export", "import", "sanction")),
    ThemeRule("Energy Markets", ("oil", "gas", "opec", "energy")),
    ThemeRule("Tech & Semiconductors", ("semiconductor", "chip", "tech", "ai ", "nvidia")),
    ThemeRule("Elections & Politics", ("election", "vote", "parliament", "congress")),
)

# Not exclusive: an item counts toward every theme it matches
SUMMARY_THEMES = (
    ThemeRule("US-China", ("us", "america", "trade", "tariff"), anchor="china"),
    ThemeRule("Russia-Ukraine", ("russia", "ukraine", "putin", "zelensky")),
    ThemeRule("Middle East", ("israel", "iran", "saudi", "gaza", "houthi", "hezbollah")),
    ThemeRule("Central Banks", ("fed ", "ecb", "central bank", "rate", "inflation", "monetary")),
    ThemeRule("Energy", ("oil", "gas", "opec", "energy")),
    ThemeRule("Tech/Chips", ("chip", "semiconductor", "ai ", "tech")),
)
