"""Runtime package.

Keep this module dependency-light: importing `recitation.runtime.*` from unit
tests should not open network connections or read secrets at import time.
"""

__all__: list[str] = []
