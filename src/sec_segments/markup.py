"""BeautifulSoup parsing shared by the context and fact extractors.

Instance documents arrive as strict XML (the ``*_htm.xml`` companion), as
XHTML with facts inlined, or as HTML that is not well-formed at all. The
lxml HTML parser reads all three without giving up on bad markup. It keeps
prefixed names such as ``ix:nonFraction`` whole and lowercases tag and
attribute names, so everything downstream matches on lowercase names.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

PARSER = "lxml"


def parse_markup(markup: str | BeautifulSoup) -> BeautifulSoup:
    """Parse once; an already-parsed soup is passed straight through."""
    if isinstance(markup, BeautifulSoup):
        return markup
    return BeautifulSoup(markup or "", PARSER)


def qualified_name(tag: Tag) -> str:
    """``"us-gaap:revenues"``: prefix and local name, lowercased."""
    name = tag.name or ""
    if tag.prefix and ":" not in name:
        name = f"{tag.prefix}:{name}"
    return name.lower()


def local_name(name: str) -> str:
    """``"xbrli:startDate"`` → ``"startdate"``."""
    return name.rsplit(":", 1)[-1].lower()


def find_local(parent: Tag, name: str) -> list[Tag]:
    """Descendants of ``parent`` whose local name is ``name``, any prefix."""
    return parent.find_all(lambda t: local_name(t.name or "") == name)


def attr(tag: Tag, name: str, default: str | None = None) -> str | None:
    """Case-insensitive attribute lookup (``contextRef`` == ``contextref``)."""
    value = tag.get(name.lower())
    if value is not None:
        return value
    wanted = name.lower()
    for key, val in tag.attrs.items():
        if key.lower() == wanted:
            return val
    return default
