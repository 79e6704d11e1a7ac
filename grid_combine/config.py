# config.py
"""
Application configuration constants for Grid Combine
"""

# Layout modes
MODE_WIDTH_COL = "width_col"    # fixed total width, fixed column count
MODE_HEIGHT_ROW = "height_row"  # fixed total height, fixed row count
LAYOUT_MODES = (MODE_WIDTH_COL, MODE_HEIGHT_ROW)

# Ratio strategies
FIT_AVERAGE = "average"
FIT_PORTRAIT = "portrait"
FIT_LANDSCAPE = "landscape"
FIT_MAX_DIMENSIONS = "max_dimensions"
FIT_ORIGINAL = "original"
FIT_MODES = (FIT_AVERAGE, FIT_PORTRAIT, FIT_LANDSCAPE, FIT_MAX_DIMENSIONS, FIT_ORIGINAL)

# Anchor points, row-major from the top-left corner
ANCHORS = (
    "top-left", "top-center", "top-right",
    "center-left", "center", "center-right",
    "bottom-left", "bottom-center", "bottom-right",
)

# Settings defaults
DEFAULT_MODE = MODE_WIDTH_COL
DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
DEFAULT_COLUMNS = 3
DEFAULT_ROWS = 2
DEFAULT_GAP = 10
DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_FIT_MODE = FIT_AVERAGE
DEFAULT_ANCHOR = "center"

# Geometry
OVERLAP_TOLERANCE = 1e-6  # float slack when checking that cells are disjoint

# Loader settings
SUPPORTED_IMAGE_FORMATS = ['png', 'jpg', 'jpeg', 'bmp', 'webp', 'gif', 'tiff']
PLACEHOLDER_SIZE = 100            # stand-in width/height for undecodable files
PLACEHOLDER_COLOR = (245, 245, 245)
LOADER_MAX_WORKERS = 4

# Cache settings
MAX_CACHE_SIZE = 50
CACHE_CLEANUP_THRESHOLD = 0.8  # Cleanup when cache reaches 80% of max size

# Export options
EXPORT_FILENAME_PREFIX = "grid_combine"
EXPORT_DEFAULT_EXTENSION = ".png"
EXPORT_FORMATS = ['png', 'jpg', 'jpeg', 'webp', 'bmp', 'tiff']
QUALITY_MIN = 1
QUALITY_MAX = 100
QUALITY_DEFAULT = 95

# Logging
LOGGER_NAME = "grid_combine"
LOG_LEVEL_ENV = "GRID_COMBINE_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 5
