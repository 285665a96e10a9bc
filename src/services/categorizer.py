"""Keyword-based topical categorization of scraped content."""
DEFAULT_CATEGORY = "General"

# Evaluated in order; the first matching rule wins.
CATEGORY_RULES: list[tuple[tuple[str, ...], str]] = [
    (("react", "javascript", "typescript", "programming", "code"), "Development"),
    (("design", "ui", "ux", "interface"), "Design"),
    (("business", "startup", "entrepreneur"), "Business"),
    (("ai", "machine learning", "artificial intelligence"), "Technology"),
    (("database", "mongodb", "sql"), "Database"),
]

CATEGORIES = [label for _, label in CATEGORY_RULES] + [DEFAULT_CATEGORY]


def categorize_content(title: str, content: str) -> str:
    """
    Assign a single category label to a page.

    A rule matches when any of its keywords occurs anywhere in the lowercased
    title and content, so "startups" and "PostgreSQL" match "startup" and
    "sql". Returns DEFAULT_CATEGORY when no rule matches.
    """
    text = f"{title} {content}".lower()
    for keywords, label in CATEGORY_RULES:
        if any(keyword in text for keyword in keywords):
            return label
    return DEFAULT_CATEGORY
