"""
Slug helper shared by field registry and tag builder.
"""
import re

_QUOTES = re.compile(r"['\"]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str | None) -> str:
    """
    Lowercase, drop quote characters, collapse every run of non-[a-z0-9]
    into a single '-', and trim leading/trailing '-'.

    >>> slugify('Ford F-150!')
    'ford-f-150'
    """
    if not value:
        return ""
    s = value.lower().strip()
    s = _QUOTES.sub("", s)
    s = _NON_ALNUM.sub("-", s)
    return s.strip("-")
