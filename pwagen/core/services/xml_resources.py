"""
Android resource XML patching — strings.xml, colors.xml.

Each patch is load → mutate → write back, all inside one call. The
parsed tree never outlives the call.
"""

from __future__ import annotations

import asyncio
import io
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from pwagen.core.errors import XmlPatchError

logger = logging.getLogger(__name__)

_XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'


def _namespace_prefixes(data: bytes) -> list[tuple[str, str]]:
    return [ns for _, ns in ET.iterparse(io.BytesIO(data), events=("start-ns",))]


def _patch_file(
    path: Path,
    tag: str,
    attribute_key: str,
    attribute_value: str,
    new_text: str,
) -> int:
    data = path.read_bytes()
    # Keep the document's own prefixes (tools:, android:) on the way out
    for prefix, uri in _namespace_prefixes(data):
        try:
            ET.register_namespace(prefix, uri)
        except ValueError:
            # ns<N> is reserved by ElementTree and renumbered on output
            logger.debug("Cannot keep reserved prefix %r in %s", prefix, path.name)

    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    parser.feed(data)
    root = parser.close()

    matched = 0
    for element in root.iter(tag):
        if element.get(attribute_key) == attribute_value:
            element.text = new_text
            matched += 1
    body = ET.tostring(root, encoding="unicode")
    path.write_text(_XML_DECLARATION + body + "\n", encoding="utf-8")
    return matched


async def patch_element(
    xml_file: Path | str,
    tag: str,
    attribute_key: str,
    attribute_value: str,
    new_text: str | None,
) -> int:
    """Set the text of every ``<tag attribute_key="attribute_value">``.

    An empty ``new_text`` leaves the file untouched.

    Returns:
        Number of elements updated.

    Raises:
        XmlPatchError: The file could not be read, parsed, or written.
    """
    path = Path(xml_file)
    if not new_text:
        logger.debug("No value for %s[%s=%s], leaving %s as is", tag, attribute_key, attribute_value, path.name)
        return 0
    try:
        matched = await asyncio.to_thread(
            _patch_file, path, tag, attribute_key, attribute_value, new_text
        )
    except (OSError, ET.ParseError) as e:
        raise XmlPatchError(
            f"Failed to update the {path.name} resource file.", e, path=str(path)
        ) from e
    logger.debug("Patched %d %s element(s) in %s", matched, tag, path)
    return matched
