"""
Transaction Categorization

Suggests a category and subcategory for a bank transaction from its
description, using a table of known merchant patterns plus patterns
learned from user corrections.
"""

import re
import logging
from typing import Dict, Iterable, List, Optional, Tuple
from datetime import datetime, timezone
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

MAX_LEARNED_PATTERNS = 200
LEARNED_CONFIDENCE = 0.8
MAX_LEARNED_CONFIDENCE = 0.95
LEARNED_CONFIDENCE_STEP = 0.05

CATEGORIES = ["Essentials", "Lifestyle", "Savings", "Income"]

SUB_CATEGORIES: Dict[str, List[str]] = {
    "Essentials": [
        "Rent/Mortgage", "Utilities", "Groceries", "Transport",
        "Insurance", "Healthcare", "Debt Repayment",
    ],
    "Lifestyle": [
        "Dining Out", "Entertainment", "Shopping", "Travel",
        "Gifts", "Subscriptions", "Hobbies",
    ],
    "Savings": [
        "Emergency Fund", "Retirement", "Investment", "Property",
        "Education", "Future Goals",
    ],
    "Income": [
        "Salary", "Side Hustle", "Investment Income", "Rental Income",
        "Benefits", "Gifts Received", "Tax Refund",
    ],
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MerchantMapping:
    """Known merchant and the description patterns that identify it."""

    name: str
    patterns: List[str]
    category: str
    subcategory: str
    confidence: float


@dataclass
class CategorySuggestion:
    """Suggested category for a transaction."""

    category: str
    subcategory: str
    confidence: float


@dataclass
class LearnedPattern:
    """Pattern learned from a user correction."""

    pattern: str
    category: str
    subcategory: str
    confidence: float = LEARNED_CONFIDENCE
    frequency: int = 1
    last_used: datetime = field(default_factory=_utcnow)


def _mapping(name, patterns, category, subcategory, confidence):
    return MerchantMapping(name, patterns, category, subcategory, confidence)


MERCHANT_MAPPINGS: List[MerchantMapping] = [
    # Income
    _mapping("Salary", ["salary", "wage", "payroll", "payment from employer"], "Income", "Salary", 0.95),
    _mapping("Freelance", ["freelance", "contract work", "client payment"], "Income", "Side Hustle", 0.85),
    _mapping("Dividends", ["dividend", "investment income"], "Income", "Investment Income", 0.9),
    _mapping("Rental Income", ["rent received", "tenant", "property income"], "Income", "Rental Income", 0.9),
    _mapping("Benefits", ["universal credit", "benefit", "dwp"], "Income", "Benefits", 0.9),
    _mapping("Tax Refund", ["tax refund", "hmrc refund", "rebate"], "Income", "Tax Refund", 0.95),
    # Essentials
    _mapping("Mortgage", ["mortgage", "home loan"], "Essentials", "Rent/Mortgage", 0.95),
    _mapping("Rent", ["rent", "landlord", "letting"], "Essentials", "Rent/Mortgage", 0.9),
    _mapping("Electricity", ["electricity", "edf", "octopus energy"], "Essentials", "Utilities", 0.9),
    _mapping("Gas", ["british gas"], "Essentials", "Utilities", 0.9),
    _mapping("Water", ["thames water", "severn trent", "anglian water"], "Essentials", "Utilities", 0.9),
    _mapping("Council Tax", ["council tax"], "Essentials", "Utilities", 0.95),
    _mapping("Internet", ["broadband", "virgin media", "plusnet", "talktalk"], "Essentials", "Utilities", 0.9),
    _mapping("Mobile Phone", ["vodafone", "giffgaff", "o2 mobile"], "Essentials", "Utilities", 0.8),
    _mapping("Tesco", ["tesco"], "Essentials", "Groceries", 0.9),
    _mapping("Sainsbury's", ["sainsbury"], "Essentials", "Groceries", 0.9),
    _mapping("Asda", ["asda"], "Essentials", "Groceries", 0.9),
    _mapping("Aldi", ["aldi"], "Essentials", "Groceries", 0.9),
    _mapping("Lidl", ["lidl"], "Essentials", "Groceries", 0.9),
    _mapping("Waitrose", ["waitrose"], "Essentials", "Groceries", 0.9),
    _mapping("Grocery", ["grocery", "supermarket"], "Essentials", "Groceries", 0.8),
    _mapping("Fuel", ["fuel", "petrol", "diesel", "esso", "texaco"], "Essentials", "Transport", 0.9),
    _mapping("Public Transport", ["train", "railway", "tfl", "oyster"], "Essentials", "Transport", 0.9),
    _mapping("Parking", ["parking", "ncp", "ringo"], "Essentials", "Transport", 0.9),
    _mapping("Taxi", ["taxi", "uber trip", "bolt ride"], "Essentials", "Transport", 0.8),
    _mapping("Car Insurance", ["car insurance", "vehicle insurance"], "Essentials", "Insurance", 0.95),
    _mapping("Home Insurance", ["home insurance", "contents insurance"], "Essentials", "Insurance", 0.95),
    _mapping("Insurance", ["insurance", "aviva", "direct line"], "Essentials", "Insurance", 0.9),
    _mapping("Pharmacy", ["pharmacy", "boots", "superdrug", "prescription"], "Essentials", "Healthcare", 0.9),
    _mapping("Dental", ["dental", "dentist"], "Essentials", "Healthcare", 0.9),
    _mapping("Credit Card", ["credit card payment", "amex payment"], "Essentials", "Debt Repayment", 0.9),
    _mapping("Student Loan", ["student loan", "student finance"], "Essentials", "Debt Repayment", 0.95),
    # Lifestyle
    _mapping("Restaurant", ["restaurant", "dining"], "Lifestyle", "Dining Out", 0.9),
    _mapping("Fast Food", ["mcdonalds", "burger king", "kfc", "dominos"], "Lifestyle", "Dining Out", 0.9),
    _mapping("Coffee Shop", ["coffee", "costa", "starbucks", "caffe nero", "pret"], "Lifestyle", "Dining Out", 0.9),
    _mapping("Takeaway", ["takeaway", "just eat", "deliveroo", "uber eats"], "Lifestyle", "Dining Out", 0.9),
    _mapping("Pub", ["pub", "wetherspoons"], "Lifestyle", "Dining Out", 0.9),
    _mapping("Cinema", ["cinema", "odeon", "cineworld", "vue"], "Lifestyle", "Entertainment", 0.9),
    _mapping("Concert", ["concert", "festival", "ticketmaster"], "Lifestyle", "Entertainment", 0.9),
    _mapping("Streaming", ["netflix", "disney", "amazon prime", "now tv"], "Lifestyle", "Subscriptions", 0.95),
    _mapping("Music", ["spotify", "apple music", "tidal"], "Lifestyle", "Subscriptions", 0.95),
    _mapping("Amazon", ["amazon"], "Lifestyle", "Shopping", 0.9),
    _mapping("eBay", ["ebay"], "Lifestyle", "Shopping", 0.9),
    _mapping("Clothing", ["clothing", "primark", "zara", "asos", "tk maxx"], "Lifestyle", "Shopping", 0.9),
    _mapping("Electronics", ["currys", "argos", "john lewis"], "Lifestyle", "Shopping", 0.9),
    _mapping("Home Goods", ["furniture", "ikea", "dunelm"], "Lifestyle", "Shopping", 0.9),
    _mapping("Hotel", ["hotel", "airbnb", "premier inn", "travelodge"], "Lifestyle", "Travel", 0.9),
    _mapping("Flight", ["flight", "airline", "easyjet", "ryanair", "british airways"], "Lifestyle", "Travel", 0.95),
    _mapping("Car Rental", ["car rental", "car hire", "hertz", "europcar"], "Lifestyle", "Travel", 0.9),
    _mapping("Charity", ["charity", "donation", "oxfam"], "Lifestyle", "Gifts", 0.9),
    _mapping("Gym", ["gym", "fitness", "pure gym", "david lloyd"], "Lifestyle", "Hobbies", 0.9),
    _mapping("Gaming", ["playstation", "xbox", "nintendo", "steam"], "Lifestyle", "Hobbies", 0.9),
    # Savings
    _mapping("Emergency Fund", ["emergency fund", "rainy day"], "Savings", "Emergency Fund", 0.95),
    _mapping("Retirement", ["pension", "sipp", "annuity"], "Savings", "Retirement", 0.95),
    _mapping("Investment", ["vanguard", "fidelity", "stocks and shares", "isa"], "Savings", "Investment", 0.95),
    _mapping("Property", ["house deposit", "down payment"], "Savings", "Property", 0.9),
    _mapping("Education", ["tuition", "university", "course fee"], "Savings", "Education", 0.9),
]

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_NOISE_PREFIX = re.compile(r"^(payment (to|from)|purchase (at|from)|withdrawal (at|from)) ")


def normalize_text(text: str) -> str:
    """Lower-case, drop punctuation and collapse whitespace."""
    text = _PUNCTUATION.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def matches_patterns(text: str, patterns: Iterable[str]) -> bool:
    """Whether any pattern appears in the normalized text."""
    normalized = normalize_text(text)
    return any(normalize_text(pattern) in normalized for pattern in patterns)


class CategorizationEngine:
    """
    Categorizes transactions and learns from corrections.

    Each engine owns its learned patterns, so separate engines do not
    share state.
    """

    def __init__(
        self,
        mappings: Optional[List[MerchantMapping]] = None,
        max_learned: int = MAX_LEARNED_PATTERNS,
    ):
        self.mappings = mappings if mappings is not None else MERCHANT_MAPPINGS
        self.max_learned = max_learned
        self.learned: List[LearnedPattern] = []

    def _find_learned(self, description: str) -> Optional[LearnedPattern]:
        normalized = normalize_text(description)
        for item in self.learned:
            if normalize_text(item.pattern) in normalized:
                return item
        return None

    def _best_mapping(self, description: str) -> Optional[MerchantMapping]:
        best = None
        for mapping in self.mappings:
            if matches_patterns(description, mapping.patterns) and (
                best is None or mapping.confidence > best.confidence
            ):
                best = mapping
        return best

    def suggest(self, description: str, amount: float = 0) -> CategorySuggestion:
        """
        Suggest a category for a transaction.

        Learned patterns win over merchant mappings. With no match the
        suggestion falls back on the sign of the amount.

        Args:
            description: Bank description of the transaction
            amount: Signed amount (negative for money out)

        Returns:
            CategorySuggestion
        """
        learned = self._find_learned(description)
        if learned:
            learned.frequency += 1
            learned.last_used = _utcnow()
            return CategorySuggestion(
                learned.category, learned.subcategory, learned.confidence
            )

        mapping = self._best_mapping(description)
        if mapping:
            return CategorySuggestion(
                mapping.category, mapping.subcategory, mapping.confidence
            )

        if amount > 0:
            return CategorySuggestion("Income", "Salary", 0.6)
        if amount == 0:
            return CategorySuggestion("Income", "Salary", 0.5)

        desc = description.lower()
        if "mortgage" in desc or "rent" in desc:
            return CategorySuggestion("Essentials", "Rent/Mortgage", 0.7)
        if "grocery" in desc or "supermarket" in desc:
            return CategorySuggestion("Essentials", "Groceries", 0.7)
        if "restaurant" in desc or "dining" in desc:
            return CategorySuggestion("Lifestyle", "Dining Out", 0.7)
        return CategorySuggestion("Lifestyle", "Shopping", 0.5)

    def learn(
        self,
        description: str,
        original: Tuple[str, str],
        corrected: Tuple[str, str],
    ) -> Optional[LearnedPattern]:
        """
        Record a user's correction of a suggested category.

        Args:
            description: Transaction description
            original: (category, subcategory) that was suggested
            corrected: (category, subcategory) chosen by the user

        Returns:
            The learned pattern, or None when nothing changed

        Raises:
            ValueError: If the description has no usable text
        """
        if tuple(original) == tuple(corrected):
            return None

        normalized = normalize_text(description)
        if not normalized:
            raise ValueError("Description must contain letters or digits")

        category, subcategory = corrected
        existing = self._find_learned(description)

        if existing:
            existing.category = category
            existing.subcategory = subcategory
            existing.frequency += 1
            existing.last_used = _utcnow()
            existing.confidence = min(
                MAX_LEARNED_CONFIDENCE, existing.confidence + LEARNED_CONFIDENCE_STEP
            )
            learned = existing
        else:
            pattern = normalized
            if len(pattern) > 10:
                pattern = _NOISE_PREFIX.sub("", pattern)
            learned = LearnedPattern(
                pattern=pattern, category=category, subcategory=subcategory
            )
            self.learned.append(learned)
            logger.debug(f"Learned pattern '{pattern}' -> {category}/{subcategory}")

        if len(self.learned) > self.max_learned:
            self.learned.sort(key=lambda item: item.last_used, reverse=True)
            del self.learned[self.max_learned:]

        return learned

    def confidence_for(self, description: str, category: str, subcategory: str) -> float:
        """Confidence that a description belongs to the given category."""
        confidence = 0.5

        for mapping in self.mappings:
            if (
                mapping.category == category
                and mapping.subcategory == subcategory
                and matches_patterns(description, mapping.patterns)
            ):
                confidence = max(confidence, mapping.confidence)

        normalized = normalize_text(description)
        for item in self.learned:
            if (
                item.category == category
                and item.subcategory == subcategory
                and normalize_text(item.pattern) in normalized
            ):
                confidence = max(confidence, item.confidence)
                break

        return confidence

    def find_similar(self, description: str, descriptions: Iterable[str]) -> List[str]:
        """Descriptions that contain, or are contained in, the given one."""
        normalized = normalize_text(description)
        similar = []
        for other in descriptions:
            other_normalized = normalize_text(other)
            if other_normalized in normalized or normalized in other_normalized:
                similar.append(other)
        return similar
