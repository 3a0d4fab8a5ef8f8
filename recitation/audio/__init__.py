from .wav import WavHeader, encode_container, pcm_duration_seconds, parse_container_header

__all__ = ["WavHeader", "encode_container", "parse_container_header", "pcm_duration_seconds"]
