"""
dvpackager - Split and package captured DV streams

This package turns a long, possibly discontinuous DV capture into a set of
independently playable files:
- Reads the per-frame analysis log produced by dvrescue
- Splits the stream where technical characteristics or recordings change
- Remuxes each range with ffmpeg into MKV, MOV or raw DV
- Adds chapter markers, language tags and technical subtitles
- Checks audio/video synchronization of every output

Ranges are derived fresh for each input; nothing but the analysis
log is reused between runs.
"""

__version__ = "0.1.0"
