"""Constants for ulb projects and the backend protocol."""


CONFIG_FILENAME = "Config.toml"
SETTINGS_FILENAME = "settings.toml"

# Project skeleton (directories created by `ulb init`)
PROJECT_DIRS = [
    "files",
    "install-files",
    "scripts",
    "repos",
    "build/release",
    "build/.cache",
]

PACKAGE_LIST_FILE = "package-lists"
PACKAGE_REMOVE_FILE = "packages-lists-remove"
DEFAULT_PACKAGES = ["base-system", "kernel"]

SUPPORTED_DISTROS = ["fedora", "debian"]

# Backend verbs and flags
VERB_BUILD = "build"
VERB_CLEAN = "clean"
VERB_STATUS = "status"
FLAG_RELEASE = "--release"
FLAG_JSON_OUTPUT = "--json-output"

# Key that asks the progress UI to stop rendering
QUIT_KEY = "q"

DEFAULT_UPDATE_URL = "https://github.com/user/ulb/releases/latest/download/ulb-backend"
