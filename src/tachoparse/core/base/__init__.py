from tachoparse.core.base.cursor import Cursor
from tachoparse.core.base.detector import detect_file_type
from tachoparse.core.base.errors import (
    ClassificationError,
    InvalidRepeatCountError,
    ParseError,
    RecordShapeError,
    TruncationError,
    UnknownTagError,
    UnsupportedGenerationError,
)
from tachoparse.core.base.logging import PROTOCOL, TRACE
from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.tables import Code
from tachoparse.core.base.types import DeviceClass, FileType, Generation

__all__ = [
    "ClassificationError",
    "Code",
    "CodedText",
    "Cursor",
    "DeviceClass",
    "FileType",
    "Generation",
    "InvalidRepeatCountError",
    "PROTOCOL",
    "ParseError",
    "RecordShapeError",
    "TRACE",
    "TruncationError",
    "UnknownTagError",
    "UnsupportedGenerationError",
    "detect_file_type",
]
