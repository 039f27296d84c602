"""
Keyword-based transaction categorisation.

A description is matched against the keywords registered for a category
name; the first category (in the caller's order) with a keyword contained
in the lowercased description wins.
"""
from typing import Any, Dict, Iterable, Optional, Tuple


MISCELLANEOUS = "Miscellaneous"

CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "Salary": ("salary", "payroll", "income", "wage"),
    "Investments": ("dividend", "interest", "investment"),
    "Housing": ("rent", "mortgage", "property"),
    "Transportation": ("uber", "lyft", "taxi", "car", "gas", "fuel", "parking"),
    "Food": ("restaurant", "grocery", "food", "meal", "cafe", "coffee"),
    "Utilities": ("electric", "water", "gas", "internet", "phone", "utility"),
    "Healthcare": ("doctor", "medical", "health", "pharmacy", "dental"),
    "Entertainment": ("movie", "theatre", "concert", "netflix", "spotify"),
    "Shopping": ("amazon", "walmart", "target", "shop", "store"),
    "Education": ("tuition", "school", "book", "course"),
    "Personal Care": ("haircut", "salon", "spa"),
    "Travel": ("hotel", "flight", "airbnb", "airline"),
    "Subscriptions": ("subscription", "membership"),
    "Insurance": ("insurance", "premium"),
    "Taxes": ("tax", "irs"),
}


def match_category(description: Optional[str], categories: Iterable[Any]) -> Optional[Any]:
    """
    Return the first category whose keywords appear in ``description``,
    falling back to a category named Miscellaneous, or None.
    """
    categories = list(categories)
    text = (description or "").lower()
    if text:
        for category in categories:
            keywords = CATEGORY_KEYWORDS.get(category.name, ())
            if any(keyword in text for keyword in keywords):
                return category

    for category in categories:
        if category.name == MISCELLANEOUS:
            return category
    return None
