"""
UK rail station names keyed by CRS code.
"""

_STATIONS = {
    "EDB": "Edinburgh Waverley",
    "BHG": "Bathgate",
}


def station_name(code: str) -> str:
    """Return the display name for a CRS code, or the code itself if unknown."""
    return _STATIONS.get(code.upper(), code)
