"""Keep an existing XMP packet in line with the document information tags.

Only the properties mirroring the managed tags are touched:

    PDF:Title     dc:title        (rdf:Alt, x-default)
    PDF:Author    dc:creator      (rdf:Seq)
    PDF:Subject   dc:description  (rdf:Alt, x-default)
    PDF:Keywords  dc:subject      (rdf:Bag, one item per keyword)
                  pdf:Keywords    (text)
"""

from __future__ import annotations

import io
import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Mapping, Sequence, Union

LOGGER = logging.getLogger(__name__)

NS = {
    "x": "adobe:ns:meta/",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "dc": "http://purl.org/dc/elements/1.1/",
    "pdf": "http://ns.adobe.com/pdf/1.3/",
    "xml": "http://www.w3.org/XML/1998/namespace",
}

PACKET_HEADER = '<?xpacket begin="\ufeff" id="W5M0MpCehiHzreSzNTczkc9d"?>\n'
PACKET_TRAILER = '\n<?xpacket end="w"?>'


def _qname(prefix: str, name: str) -> str:
    return f"{{{NS[prefix]}}}{name}"


MANAGED_PROPERTIES = (
    _qname("dc", "title"),
    _qname("dc", "creator"),
    _qname("dc", "description"),
    _qname("dc", "subject"),
    _qname("pdf", "Keywords"),
)


def _register_namespaces(packet: str) -> None:
    for _, (prefix, uri) in ET.iterparse(io.StringIO(packet), events=("start-ns",)):
        # ElementTree reserves ns0, ns1, ... for its own generated prefixes.
        if prefix and prefix != "xml" and not re.fullmatch(r"ns\d+", prefix):
            ET.register_namespace(prefix, uri)
    for prefix in ("x", "rdf", "dc", "pdf"):
        ET.register_namespace(prefix, NS[prefix])


def _container(parent: ET.Element, kind: str, items: Sequence[str], *, lang: bool = False) -> None:
    holder = ET.SubElement(parent, _qname("rdf", kind))
    for item in items:
        li = ET.SubElement(holder, _qname("rdf", "li"))
        if lang:
            li.set(_qname("xml", "lang"), "x-default")
        li.text = item


def _descriptions(rdf: ET.Element) -> List[ET.Element]:
    found = rdf.findall("rdf:Description", NS)
    if not found:
        description = ET.SubElement(rdf, _qname("rdf", "Description"))
        description.set(_qname("rdf", "about"), "")
        found = [description]
    return found


def update_xmp(packet: str, values: Mapping[str, Union[str, Sequence[str]]]) -> str:
    """Return ``packet`` with the managed properties replaced by ``values``.

    ``values`` holds ``title``, ``author`` and ``subject`` as strings and
    ``keywords`` as a sequence of strings. Raises ``ET.ParseError`` on
    malformed packets.
    """
    _register_namespaces(packet)
    root = ET.fromstring(packet)
    rdf = root if root.tag == _qname("rdf", "RDF") else root.find("rdf:RDF", NS)
    if rdf is None:
        rdf = ET.SubElement(root, _qname("rdf", "RDF"))

    descriptions = _descriptions(rdf)
    for description in descriptions:
        for child in list(description):
            if child.tag in MANAGED_PROPERTIES:
                description.remove(child)
        for attribute in MANAGED_PROPERTIES:
            description.attrib.pop(attribute, None)

    LOGGER.debug("Replacing managed XMP properties in %d description(s)", len(descriptions))
    target = descriptions[0]
    keywords = list(values.get("keywords") or [])
    _container(ET.SubElement(target, _qname("dc", "title")), "Alt", [str(values.get("title", ""))], lang=True)
    _container(ET.SubElement(target, _qname("dc", "creator")), "Seq", [str(values.get("author", ""))])
    _container(
        ET.SubElement(target, _qname("dc", "description")), "Alt", [str(values.get("subject", ""))], lang=True
    )
    _container(ET.SubElement(target, _qname("dc", "subject")), "Bag", keywords)
    ET.SubElement(target, _qname("pdf", "Keywords")).text = ", ".join(keywords)

    return PACKET_HEADER + ET.tostring(root, encoding="unicode") + PACKET_TRAILER


def read_xmp(packet: str) -> Dict[str, Union[str, List[str]]]:
    """Read the managed properties back from a packet."""
    root = ET.fromstring(packet)
    found: Dict[str, Union[str, List[str]]] = {}
    for description in root.iter(_qname("rdf", "Description")):
        for name, key in (("title", "title"), ("creator", "author"), ("description", "subject")):
            item = description.find(f"dc:{name}//rdf:li", NS)
            if item is not None:
                found[key] = item.text or ""
        bag = description.find("dc:subject/rdf:Bag", NS)
        if bag is not None:
            found["keywords"] = [li.text or "" for li in bag.findall("rdf:li", NS)]
    return found
