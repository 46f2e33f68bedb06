"""
XML properties documents.

    <?xml version="1.0" encoding="UTF-8" standalone="no"?>
    <!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">
    <properties>
    <comment>optional</comment>
    <entry key="name">value</entry>
    </properties>

Entries are written in store order and loaded in document order.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import IO, TYPE_CHECKING
from xml.sax.saxutils import escape, quoteattr

from oprops.errors import PropertiesFormatError
from oprops.syntax import XML_DOCTYPE, XML_ENCODING
from oprops.writer import is_binary_stream

if TYPE_CHECKING:
    from oprops.adapter import PropertyMap

logger = logging.getLogger("oprops.xmlprops")


def load_from_xml(target: PropertyMap, stream: IO) -> int:
    """Put every <entry> of an XML properties document into target."""
    try:
        root = ET.parse(stream).getroot()
    except ET.ParseError as e:
        raise PropertiesFormatError(f"Invalid XML properties document: {e}") from e

    if root.tag != "properties":
        raise PropertiesFormatError(f"Expected <properties> root element, got <{root.tag}>")

    count = 0
    for element in root:
        if element.tag == "comment":
            continue
        if element.tag != "entry":
            raise PropertiesFormatError(f"Unexpected element <{element.tag}> in <properties>")
        key = element.get("key")
        if key is None:
            raise PropertiesFormatError("<entry> element without a key attribute")
        target.put(key, element.text or "")
        count += 1

    logger.debug("loaded %d entries from XML", count)
    return count


def _text(value: str) -> str:
    # A raw \r in element text would come back as \n
    return escape(value, {"\r": "&#13;"})


def to_xml(source: PropertyMap, comment: str | None = None, encoding: str = XML_ENCODING) -> str:
    """Render source as an XML properties document."""
    lines = [
        f'<?xml version="1.0" encoding="{encoding}" standalone="no"?>',
        XML_DOCTYPE,
        "<properties>",
    ]
    if comment is not None:
        lines.append(f"<comment>{_text(comment)}</comment>")
    for key in source.keys():
        value = source.get(key)
        if value is None:
            continue
        lines.append(f"<entry key={quoteattr(key)}>{_text(value)}</entry>")
    lines.append("</properties>")
    return "\n".join(lines) + "\n"


def store_to_xml(
    source: PropertyMap,
    stream: IO,
    comment: str | None = None,
    encoding: str = XML_ENCODING,
) -> None:
    """Write source as an XML properties document. The stream is not closed."""
    document = to_xml(source, comment, encoding)
    if is_binary_stream(stream):
        stream.write(document.encode(encoding, "xmlcharrefreplace"))
    else:
        stream.write(document)
    stream.flush()
