from pathlib import PurePath
from typing import Dict, List, Union

from student_registry.formats.base import ExportFormat, RecordCodec
from student_registry.formats.csv_codec import CsvCodec
from student_registry.formats.json_codec import JsonCodec
from student_registry.formats.text_codec import TextCodec
from student_registry.formats.xml_codec import XmlCodec
from student_registry.utils.errors import UnsupportedFormatError
from student_registry.utils.logging import get_logger

logger = get_logger()


class CodecRegistry:
    """Lookup table from export format, or import file extension, to codec"""

    _codecs: Dict[ExportFormat, RecordCodec] = {
        ExportFormat.TEXT: TextCodec(),
        ExportFormat.CSV: CsvCodec(),
        ExportFormat.XML: XmlCodec(),
        ExportFormat.JSON: JsonCodec(),
    }

    @classmethod
    def get(cls, export_format: Union[ExportFormat, str]) -> RecordCodec:
        """Codec for an export format"""
        try:
            return cls._codecs[ExportFormat(export_format)]
        except ValueError:
            raise UnsupportedFormatError(f"Formato no soportado: {export_format}")

    @classmethod
    def for_filename(cls, filename: str) -> RecordCodec:
        """Codec for an import file, chosen by extension only"""
        extension = PurePath(filename).suffix.lstrip(".").lower()
        for codec in cls._codecs.values():
            if codec.extension == extension:
                return codec

        logger.warning(f"No codec registered for file: {filename}")
        raise UnsupportedFormatError(
            f"Formato de archivo no soportado: {filename or '(sin nombre)'}"
        )

    @classmethod
    def list_formats(cls) -> List[ExportFormat]:
        return list(cls._codecs.keys())

    @classmethod
    def list_extensions(cls) -> List[str]:
        return [codec.extension for codec in cls._codecs.values()]
