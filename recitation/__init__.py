"""Recitation companion server package."""

__all__: list[str] = []
