"""Constants for the Coursier setup helper."""

TOOL_NAME = "cs"
DEFAULT_VERSION = "2.1.0-M7-39-gb8f3d7532"
RELEASES_BASE_URL = "https://github.com/coursier/coursier/releases/download"
BLOCK_SIZE = 8192  # 8KB block size for file processing
