from .der import (
    DerError,
    IntegerOverflow,
    NonMinimalLength,
    TrailingBytes,
    TruncatedInput,
    UnexpectedTag,
    UuidV7Record,
    decode,
    encode,
)
from .jer import parse, render, render_raw
from .raw import decode_raw, encode_raw
from .uuid7 import RawUuidV7, UuidV7Seeds, new_uuid7

__version__ = '0.1.0'
