"""Server configuration constants."""

DEFAULT_API_PORT = 8000
DEFAULT_DATA_DIR = "data/saves"

# Separator width for console banners
SEPARATOR_WIDTH = 60
