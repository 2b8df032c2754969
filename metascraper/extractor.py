"""Title and meta-description extraction from an HTML document."""
from __future__ import annotations

from typing import IO, List, Union

from bs4 import BeautifulSoup, NavigableString, Tag

from .errors import ParseError
from .models import PageMetadata

HtmlSource = Union[bytes, str, IO[bytes], IO[str]]


def extract_metadata(source: HtmlSource) -> PageMetadata:
    """Return the title and meta description found inside the first <head>.

    source may be raw bytes/str or a readable stream; a stream is read once.
    The document is built with HTML5 tree-construction rules, so an omitted
    <head> tag is implied and <body> closes an unclosed head. Malformed
    markup is tolerated. Only input the parser cannot consume at
    all raises ParseError. Missing elements yield empty strings.

    Within <head>, descendants are visited in document order and a later
    <title> or <meta name="description"> overwrites an earlier one.
    """
    try:
        if hasattr(source, "read"):
            source = source.read()
        soup = BeautifulSoup(source, "html5lib")
    except Exception as exc:  # noqa: BLE001
        raise ParseError(f"unable to parse HTML: {exc}") from exc

    head = soup.find("head")
    if head is None:
        return PageMetadata()

    title = ""
    description = ""
    stack: List[Tag] = [head]
    while stack:
        node = stack.pop()
        if node is not head:
            if node.name == "title":
                title = _first_child_text(node)
            elif node.name == "meta" and node.get("name") == "description":
                content = node.get("content")
                if content is not None:
                    description = content
        # reversed so that the first child is popped first
        stack.extend(child for child in reversed(node.contents) if isinstance(child, Tag))

    return PageMetadata(title=title, description=description)


def _first_child_text(node: Tag) -> str:
    if not node.contents:
        return ""
    first = node.contents[0]
    if isinstance(first, NavigableString):
        return str(first)
    return ""
