from __future__ import annotations

from ..models.format_settings import DateFormat

"""Static locale tables: month names per date scheme and display separators."""

__all__ = [
    "MONTH_MAPPINGS",
    "ENGLISH_MONTH_ABBREVIATIONS",
    "DISPLAY_LOCALE_SEPARATORS",
    "DEFAULT_DISPLAY_LOCALE",
    "resolve_display_separators",
]

ENGLISH_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_ENGLISH = {name.lower(): idx + 1 for idx, name in enumerate(ENGLISH_MONTH_ABBREVIATIONS)}
_ENGLISH_FULL = {
    "january": 1, "february": 2, "march": 3, "april": 4, "june": 6, "july": 7,
    "august": 8, "september": 9, "sept": 9, "october": 10, "november": 11, "december": 12,
}

# Keys are lowercase and without the trailing period; lookups strip it too.
_FRENCH = {
    "janv": 1, "févr": 2, "fevr": 2, "mars": 3, "avr": 4, "mai": 5, "juin": 6,
    "juil": 7, "août": 8, "aout": 8, "sept": 9, "oct": 10, "nov": 11, "déc": 12, "dec": 12,
}
_GERMAN = {
    "jän": 1, "jan": 1, "feb": 2, "mär": 3, "mrz": 3, "apr": 4, "mai": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "okt": 10, "nov": 11, "dez": 12,
}

MONTH_MAPPINGS: dict[DateFormat, dict[str, int]] = {
    DateFormat.MONTH_FIRST: {**_ENGLISH_FULL, **_ENGLISH},
    DateFormat.MONTH_FIRST_LOWERCASE: {**_ENGLISH_FULL, **_ENGLISH, **_GERMAN, **_FRENCH},
}

DEFAULT_DISPLAY_LOCALE = "en-US"

# (decimal separator, grouping separator) per display locale
DISPLAY_LOCALE_SEPARATORS: dict[str, tuple[str, str]] = {
    "en-US": (".", ","), "en-CA": (".", ","), "es-MX": (".", ","),
    "pt-BR": (",", "."), "es-AR": (",", "."),
    "en-GB": (".", ","), "de-DE": (",", "."), "fr-FR": (",", " "),
    "es-ES": (",", "."), "it-IT": (",", "."), "nl-NL": (",", "."),
    "pl-PL": (",", " "), "ru-RU": (",", " "), "uk-UA": (",", " "),
    "cs-CZ": (",", " "), "sv-SE": (",", " "), "da-DK": (",", "."),
    "fi-FI": (",", " "), "nb-NO": (",", " "), "el-GR": (",", "."),
    "pt-PT": (",", " "), "tr-TR": (",", "."),
    "ja-JP": (".", ","), "ko-KR": (".", ","), "zh-CN": (".", ","), "zh-TW": (".", ","),
    "th-TH": (".", ","), "vi-VN": (",", "."), "id-ID": (",", "."),
    "en-AU": (".", ","), "en-NZ": (".", ","), "hi-IN": (".", ","),
    "ar-SA": (".", ","), "he-IL": (".", ","), "en-ZA": (",", " "),
}


def resolve_display_separators(display_locale: str | None) -> tuple[str, str]:
    """Return (decimal, grouping) separators for a BCP 47 tag.

    Unknown region variants fall back to the first known locale with the same
    language, then to en-US.
    """
    tag = display_locale or DEFAULT_DISPLAY_LOCALE
    if tag in DISPLAY_LOCALE_SEPARATORS:
        return DISPLAY_LOCALE_SEPARATORS[tag]
    language = tag.split("-", 1)[0].lower()
    for known, separators in DISPLAY_LOCALE_SEPARATORS.items():
        if known.split("-", 1)[0] == language:
            return separators
    return DISPLAY_LOCALE_SEPARATORS[DEFAULT_DISPLAY_LOCALE]
