"""Application-wide constants and default values."""

# Tile provider
DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_ATTRIBUTION = "© OpenStreetMap contributors"
DEFAULT_USER_AGENT = "GeoSpot/0.1 (+https://github.com/geospot/geospot)"
TILE_SIZE = 256  # pixels per tile edge

# Camera defaults
DEFAULT_CENTER = (48.8566, 2.3522)  # Paris
DEFAULT_ZOOM = 13
FOCUS_MIN_ZOOM = 15
POSITION_TOLERANCE_DEG = 1e-5
FLY_DURATION_MS = 500

# Marker glyphs (pixels)
ICON_SIZE = 24
ICON_ANCHOR = (12, 24)  # bottom-center of the glyph sits on the coordinate
POPUP_ANCHOR = (0, -24)  # popup tip offset from the marker coordinate

# Popup text
POPUP_DESCRIPTION_LIMIT = 150
NO_DESCRIPTION_TEXT = "No description available."
LINK_TEXT = "View on Wikipedia"

# Default window dimensions (pixels)
DEFAULT_WINDOW_WIDTH = 1280
DEFAULT_WINDOW_HEIGHT = 720
