"""PCM -> WAV container codec.

Browsers cannot play headerless PCM, so synthesized speech that arrives as raw
linear PCM is wrapped in the canonical 44-byte RIFF/WAVE header before it is
attached to a reply. Everything here is pure: no I/O, no state between calls.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from recitation.errors import InvalidFormat
from recitation.config.audio import (
    WAV_FORMAT_PCM,
    WAV_HEADER_SIZE,
    DEFAULT_CHANNEL_COUNT,
    DEFAULT_SAMPLE_RATE_HZ,
    DEFAULT_BITS_PER_SAMPLE,
)

# RIFF size field counts everything after itself: "WAVE" + fmt chunk (24) + data chunk header (8).
_RIFF_OVERHEAD = WAV_HEADER_SIZE - 8
_FMT_CHUNK_SIZE = 16
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True, slots=True)
class WavHeader:
    sample_rate_hz: int
    channel_count: int
    bits_per_sample: int
    byte_rate: int
    block_align: int
    data_size: int
    file_size: int
    format_tag: int = WAV_FORMAT_PCM


def _validate_format(sample_rate_hz: int, channel_count: int, bits_per_sample: int) -> None:
    if bits_per_sample <= 0 or bits_per_sample % 8 != 0:
        raise InvalidFormat(f"bits_per_sample must be a positive multiple of 8, got {bits_per_sample}")
    if channel_count < 1:
        raise InvalidFormat(f"channel_count must be >= 1, got {channel_count}")
    if sample_rate_hz < 1:
        raise InvalidFormat(f"sample_rate_hz must be >= 1, got {sample_rate_hz}")


def encode_container(
    pcm: bytes,
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
    channel_count: int = DEFAULT_CHANNEL_COUNT,
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE,
) -> bytes:
    """Wrap interleaved little-endian PCM samples in a WAV container.

    The sample payload is copied through unmodified; any byte length is accepted.
    """
    _validate_format(sample_rate_hz, channel_count, bits_per_sample)

    data = bytes(pcm)
    block_align = channel_count * bits_per_sample // 8
    byte_rate = sample_rate_hz * block_align
    header = _HEADER_STRUCT.pack(
        b"RIFF",
        len(data) + _RIFF_OVERHEAD,
        b"WAVE",
        b"fmt ",
        _FMT_CHUNK_SIZE,
        WAV_FORMAT_PCM,
        channel_count,
        sample_rate_hz,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        len(data),
    )
    return header + data


def parse_container_header(container: bytes) -> WavHeader:
    """Read back the canonical header written by `encode_container`."""
    if len(container) < WAV_HEADER_SIZE:
        raise InvalidFormat(f"container shorter than {WAV_HEADER_SIZE}-byte header ({len(container)} bytes)")

    (
        riff,
        file_size,
        wave,
        fmt,
        fmt_size,
        format_tag,
        channel_count,
        sample_rate_hz,
        byte_rate,
        block_align,
        bits_per_sample,
        data_tag,
        data_size,
    ) = _HEADER_STRUCT.unpack_from(container)

    if riff != b"RIFF" or wave != b"WAVE":
        raise InvalidFormat("missing RIFF/WAVE tags")
    if fmt != b"fmt " or fmt_size != _FMT_CHUNK_SIZE:
        raise InvalidFormat("missing canonical fmt chunk")
    if data_tag != b"data":
        raise InvalidFormat("missing data chunk")

    return WavHeader(
        sample_rate_hz=sample_rate_hz,
        channel_count=channel_count,
        bits_per_sample=bits_per_sample,
        byte_rate=byte_rate,
        block_align=block_align,
        data_size=data_size,
        file_size=file_size,
        format_tag=format_tag,
    )


def pcm_duration_seconds(
    num_bytes: int,
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ,
    channel_count: int = DEFAULT_CHANNEL_COUNT,
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE,
) -> float:
    _validate_format(sample_rate_hz, channel_count, bits_per_sample)
    block_align = channel_count * bits_per_sample // 8
    return float(num_bytes // block_align) / float(sample_rate_hz)


__all__ = ["WavHeader", "encode_container", "parse_container_header", "pcm_duration_seconds"]
