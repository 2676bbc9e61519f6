"""Company name normalization for fuzzy matching.

Turns a raw firm name into the comparison key used both when indexing
organizations and when querying with a contact's company:

1. Lowercase and trim
2. Strip trailing legal-entity suffixes, repeatedly ("Foo Co., Inc." -> "foo")
3. Strip punctuation left behind by each removal
4. Replace remaining punctuation with spaces and collapse whitespace

Examples:
- "Acme Capital, Inc."             -> "acme capital"
- "Sequoia Capital Management LLC" -> "sequoia capital management"
- "Goldman Sachs Group, Inc."      -> "goldman sachs group"
- "LLC"                            -> ""
"""

import re
from typing import Optional

# Registered legal forms; always removed from the end of a name
LEGAL_FORM_SUFFIXES: tuple[str, ...] = (
    "inc",
    "incorporated",
    "corp",
    "corporation",
    "llc",
    "llp",
    "ltd",
    "limited",
    "co",
    "company",
    "pllc",
    "lp",
    "plc",
)

# Words firms use as part of their trading name; only dropped when the
# whole name is made of suffix words ("Capital Management LLC")
DESCRIPTOR_SUFFIXES: tuple[str, ...] = (
    "group",
    "partners",
    "holdings",
    "capital",
    "management",
    "advisors",
    "advisory",
)

SUFFIX_TOKENS = frozenset(LEGAL_FORM_SUFFIXES + DESCRIPTOR_SUFFIXES)

# Suffix must start a token; underscore counts as a separator
_LEGAL_SUFFIX_RE = re.compile(
    r"(?<![^\W_])(?:" + "|".join(LEGAL_FORM_SUFFIXES) + r")\.?\Z",
    re.IGNORECASE,
)
# Anything that is neither a word character nor whitespace, plus underscore
_PUNCTUATION_RE = re.compile(r"[^\w\s]|_")
_TRAILING_JUNK_RE = re.compile(r"(?:[^\w\s]|_|\s)+$")
_WHITESPACE_RE = re.compile(r"\s+")


def _strip_trailing_junk(value: str) -> str:
    return _TRAILING_JUNK_RE.sub("", value)


def _strip_legal_suffixes(value: str) -> str:
    """Remove trailing legal forms until none is left at the end."""
    current = _strip_trailing_junk(value)
    while True:
        stripped = _strip_trailing_junk(_LEGAL_SUFFIX_RE.sub("", current))
        if stripped == current:
            return current
        current = stripped


def normalize_company_name(name: Optional[str]) -> str:
    """Normalize a company name into its comparison key.

    Pure and idempotent: ``normalize(normalize(x)) == normalize(x)``.

    Args:
        name: Raw company name (may be None or blank)

    Returns:
        Lowercase name without legal suffixes or punctuation; "" for blank
        input or names made only of suffix words
    """
    if not name:
        return ""

    value = _strip_legal_suffixes(name.lower().strip())
    value = _PUNCTUATION_RE.sub(" ", value)
    value = _WHITESPACE_RE.sub(" ", value).strip()

    if value and all(token in SUFFIX_TOKENS for token in value.split(" ")):
        return ""
    return value


def significant_tokens(normalized: str, min_length: int = 3) -> frozenset[str]:
    """Words of a normalized name long enough to carry identity."""
    return frozenset(token for token in normalized.split(" ") if len(token) >= min_length)
