import os
import logging
import xml.etree.ElementTree as ET

from txc2gtfs.helper.exceptions import MalformedScheduleError

logger = logging.getLogger(__name__)


def local_name(tag):
    return tag.split('}')[-1]


def element_to_record(element):
    """
    Converts an element into the generic nested record the normalizer reads.

    Every child element becomes a list under its local name, attributes are kept under '$' and
    text that sits alongside attributes or children under '_'. A bare leaf is just its text.
    """
    children = list(element)
    text = (element.text or '').strip()
    attributes = {local_name(key): value for key, value in element.attrib.items()}

    if not children and not attributes:
        return text

    record = {}
    if attributes:
        record['$'] = attributes
    if text:
        record['_'] = text

    for child in children:
        record.setdefault(local_name(child.tag), []).append(element_to_record(child))

    return record


def process_xml_file(source):
    """Parses a TransXChange file (path or file object) into {'TransXChange': record}."""
    try:
        # Attempt to parse XML
        tree = ET.parse(source)
    except ET.ParseError as e:
        raise MalformedScheduleError(f"Failed to parse {source}: {e}")

    root = tree.getroot()
    if local_name(root.tag) != 'TransXChange':
        raise MalformedScheduleError(f"{source} is not a TransXChange document (root is {local_name(root.tag)})")

    record = element_to_record(root)
    return {'TransXChange': record if isinstance(record, dict) else {}}


def process_xml_string(xml_text):
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise MalformedScheduleError(f"Failed to parse document: {e}")

    record = element_to_record(root)
    return {local_name(root.tag): record if isinstance(record, dict) else {}}


def list_xml_files(directory_path):
    """All .xml files below a directory, in a stable order."""
    xml_files = []
    for dirpath, _, filenames in os.walk(directory_path):
        for filename in filenames:
            if filename.lower().endswith('.xml'):
                xml_files.append(os.path.join(dirpath, filename))

    xml_files.sort()
    logger.info(f"Found {len(xml_files)} TransXChange file(s) in {directory_path}")
    return xml_files
