"""Hard-coded configuration constants not meant to be user-configurable."""

DEFAULT_CONFIG_DIRNAME = ".projscan"
CONFIG_FILENAME = "config.json"
LOCAL_CONFIG_FILENAME = ".projscan.json"
CONFIG_DIR_ENV = "PROJSCAN_CONFIG_DIR"

NO_EXTENSION_BUCKET = "(no extension)"
NULL_DEVICE_PATH = "/dev/null"
SHORT_ID_LENGTH = 7
WORDS_PER_MINUTE = 225

GITIGNORE_MODES = ("simple", "gitwildmatch")
