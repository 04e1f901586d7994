from .base import ExportFormat, RecordCodec
from .text_codec import TextCodec
from .csv_codec import CsvCodec
from .xml_codec import XmlCodec
from .json_codec import JsonCodec
from .registry import CodecRegistry

__all__ = [
    "ExportFormat",
    "RecordCodec",
    "TextCodec",
    "CsvCodec",
    "XmlCodec",
    "JsonCodec",
    "CodecRegistry",
]
