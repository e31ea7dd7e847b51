"""FFProbe utilities for reading back produced outputs"""

from .exec import MetadataError, get_media_property, get_stream_tag

__all__ = [
    'MetadataError',
    'get_media_property',
    'get_stream_tag',
]
