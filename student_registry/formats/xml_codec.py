import re
import xml.etree.ElementTree as ET
from typing import List, Sequence

from student_registry.formats.base import ExportFormat, RecordCodec
from student_registry.schemas.student_schemas import FIELD_ORDER, StudentRecord
from student_registry.utils.errors import DecodeError, EncodeError

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
ROOT_TAG = "students"
RECORD_TAG = "student"

# Characters outside the XML 1.0 Char production; no escape can carry them
NON_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


class XmlCodec(RecordCodec):
    """
    ``<students>`` document with one ``<student>`` element per record and one
    child element per field, tagged with the field key.

    Carriage returns are written as ``&#13;`` so they survive parsing instead
    of being normalised to line feeds. Records holding control characters that
    XML 1.0 cannot represent are refused with :class:`EncodeError`.
    """

    format = ExportFormat.XML
    extension = "xml"
    media_type = "application/xml"

    def encode(self, records: Sequence[StudentRecord]) -> str:
        root = ET.Element(ROOT_TAG)
        for position, record in enumerate(records, start=1):
            node = ET.SubElement(root, RECORD_TAG)
            for field, value in zip(FIELD_ORDER, record.ordered_values()):
                match = NON_XML_CHARS.search(value)
                if match:
                    raise EncodeError(
                        f"xml record {position} field {field.value} holds "
                        f"U+{ord(match.group()):04X}, which XML 1.0 cannot represent"
                    )
                ET.SubElement(node, field.value).text = value

        ET.indent(root, space="  ")
        document = ET.tostring(root, encoding="unicode").replace("\r", "&#13;")
        return f"{XML_DECLARATION}\n{document}"

    def decode(self, text: str) -> List[StudentRecord]:
        try:
            root = ET.fromstring(text.encode("utf-8"))
        except (ET.ParseError, UnicodeEncodeError) as e:
            raise DecodeError(f"XML document is not well-formed: {e}") from e

        records = []
        for position, node in enumerate(root.iter(RECORD_TAG), start=1):
            values = {}
            for field in FIELD_ORDER:
                # Missing or empty field elements read as empty strings
                element = next(node.iter(field.value), None)
                values[field.value] = "" if element is None else "".join(element.itertext())
            records.append(self._build_record(values, position))
        return records
