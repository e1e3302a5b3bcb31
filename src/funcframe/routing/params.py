"""Path parameter patterns for route segments like ``{name}``.

``{name:path}`` is the catch-all: it consumes the rest of the path,
including nothing at all.
"""

# regex pattern for each supported converter
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "path": r".*",
}
