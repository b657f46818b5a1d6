"""XML and HTML helpers for govinfo bulk data documents."""

from __future__ import annotations

import re
from typing import Any, Optional
from xml.parsers.expat import ExpatError

import xmltodict
from bs4 import BeautifulSoup

from components.models import MalformedDocument, MissingRequiredField

_BLOCK_TAGS = ["p", "div", "ul", "ol", "h1", "h2", "h3", "h4", "h5", "h6"]
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SPACES = re.compile(r"[ \t\r\f\v\xa0]+")


def parse_xml(body: bytes | str) -> dict[str, Any]:
    """Parse an XML document into a nested dict tree.

    Attributes are dropped. A repeated element becomes a list; a single
    element stays a scalar or mapping, so callers must accept both.

    Raises:
        MalformedDocument: if the body is not well-formed XML
    """
    try:
        return xmltodict.parse(body, xml_attribs=False) or {}
    except ExpatError as e:
        raise MalformedDocument(str(e)) from e


def bill_tree_from(body: bytes | str) -> dict[str, Any]:
    """Parse a BILLSTATUS document and return its <bill> record.

    Raises:
        MissingRequiredField: if the document has no <bill> element
    """
    tree = parse_xml(body)
    root = tree.get("billStatus", tree)
    bill = (root or {}).get("bill")
    if not isinstance(bill, dict):
        raise MissingRequiredField("bill")
    return bill


def html_to_text(html: Optional[str]) -> str:
    """Convert summary HTML into plain text with light markdown.

    Paragraphs are separated by blank lines, list items are prefixed
    with "- ", entities are decoded and runs of whitespace compressed.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for item in soup.find_all("li"):
        item.insert(0, "- ")
        item.append("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.append("\n\n")

    paragraphs = []
    for chunk in _PARAGRAPH_BREAK.split(soup.get_text()):
        lines = [_SPACES.sub(" ", line).strip() for line in chunk.splitlines()]
        lines = [line for line in lines if line]
        if lines:
            paragraphs.append("\n".join(lines))
    return "\n\n".join(paragraphs)
