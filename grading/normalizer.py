"""Vietnamese text normalization for answer comparison.

Removes tone marks and vowel modifiers so learners who cannot type
Vietnamese diacritics still match the expected answer:

- "Xin chào" -> "xin chao"
- "Cà phê" -> "ca phe"
- "Học sinh" -> "hoc sinh"

Both the submitted value and the canonical value must go through the same
function before they are compared.
"""

import re
import unicodedata

_FOLD_GROUPS = {
    "a": "àáảãạăằắẳẵặâầấẩẫậ",
    "e": "èéẻẽẹêềếểễệ",
    "i": "ìíỉĩị",
    "o": "òóỏõọôồốổỗộơờớởỡợ",
    "u": "ùúủũụưừứửữự",
    "y": "ỳýỷỹỵ",
    "d": "đ",
}


def _build_fold_table() -> dict[int, str]:
    table: dict[int, str] = {}
    for base, accented in _FOLD_GROUPS.items():
        for char in accented:
            table[ord(char)] = base
            table[ord(char.upper())] = base.upper()
    return table


VIETNAMESE_FOLD_TABLE = _build_fold_table()

_WHITESPACE_RE = re.compile(r"\s+")


def fold_diacritics(text: str | None) -> str:
    """Replace every Vietnamese accented letter with its base letter.

    Case is preserved: "Đà Nẵng" becomes "Da Nang".
    """
    if not text:
        return ""
    # Compose first so decomposed input (base + combining mark) folds too
    composed = unicodedata.normalize("NFC", text)
    return composed.translate(VIETNAMESE_FOLD_TABLE)


def strip_punctuation(text: str) -> str:
    """Drop all Unicode punctuation (P*) and symbol (S*) characters."""
    return "".join(
        char for char in text if unicodedata.category(char)[0] not in ("P", "S")
    )


def normalize_for_comparison(
    text: str | None,
    *,
    preserve_case: bool = False,
    preserve_whitespace: bool = False,
) -> str:
    """Canonicalize text for exercise answer comparison.

    Steps:
    1. Remove punctuation and symbols
    2. Fold diacritics
    3. Collapse whitespace runs to one space and trim (unless preserved)
    4. Lowercase (unless preserved)

    Missing or empty input normalizes to the empty string.

    Examples:
        >>> normalize_for_comparison("Xin chào, bạn khỏe không?")
        'xin chao ban khoe khong'
        >>> normalize_for_comparison("Hôm nay, trời đẹp!", preserve_case=True)
        'Hom nay troi dep'
    """
    if not text:
        return ""

    # Strip before folding: a symbol between a letter and its tone mark
    # would otherwise block composition until a second pass
    normalized = fold_diacritics(strip_punctuation(text))

    if not preserve_whitespace:
        normalized = _WHITESPACE_RE.sub(" ", normalized).strip()

    if not preserve_case:
        normalized = normalized.lower()

    return normalized


def compare_text(
    first: str | None,
    second: str | None,
    *,
    case_sensitive: bool = False,
    ignore_punctuation: bool = False,
) -> bool:
    """Compare two strings without considering diacritics."""
    if not first or not second:
        return (first or "") == (second or "")

    if ignore_punctuation:
        return normalize_for_comparison(
            first, preserve_case=case_sensitive
        ) == normalize_for_comparison(second, preserve_case=case_sensitive)

    folded_first = fold_diacritics(first)
    folded_second = fold_diacritics(second)
    if case_sensitive:
        return folded_first == folded_second
    return folded_first.lower() == folded_second.lower()


def contains_text(
    text: str | None, term: str | None, *, case_sensitive: bool = False
) -> bool:
    """Check whether text contains term, ignoring diacritics."""
    if not text or not term:
        return False

    folded_text = fold_diacritics(text)
    folded_term = fold_diacritics(term)
    if case_sensitive:
        return folded_term in folded_text
    return folded_term.lower() in folded_text.lower()
