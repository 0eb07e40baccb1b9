"""
I18N / localized-text primitives (model layer).

No FastAPI imports; shared by models, the codec and the content store.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Union

# Canonical stored form: {"fr": "...", "ar": "...", ...}
LocalizedText = Dict[str, str]

# What clients may send:
# - a plain string (default language)
# - a language map like {"fr": "...", "ar": "..."}
# - a JSON string holding such a map (multipart form fields)
RawLocalizedText = Union[str, Mapping[str, Any], None]
