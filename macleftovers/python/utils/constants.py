"""Centralized constants for macleftovers.

Provides standardized timeout values, file names and the default search
locations used throughout the codebase. Centralizing these values makes
them easier to tune and ensures consistency.
"""

# =============================================================================
# SUBPROCESS TIMEOUTS (in seconds)
# =============================================================================

# Quick local system queries that should complete almost instantly
# Used for: plutil, mdls, lipo
TIMEOUT_SYSTEM_QUICK = 5

# Upper bound on the Spotlight (mdfind) supplemental search
TIMEOUT_SPOTLIGHT = 5.0

# =============================================================================
# SIZE ANNOTATION
# =============================================================================

# Paths handed to each size worker
SIZE_CHUNK_SIZE = 10

# Upper bound on concurrent size workers
SIZE_MAX_WORKERS = 8

# =============================================================================
# CONTAINERS
# =============================================================================

# Metadata descriptor written by containermanagerd inside each sandbox container
CONTAINER_METADATA_FILE = ".com.apple.containermanagerd.metadata.plist"

# Key in the metadata descriptor holding the owning bundle identifier
CONTAINER_METADATA_ID_KEY = "MCMMetadataIdentifier"

# Canonical UUID shape used for sandbox container directory names
UUID_PATTERN = r"^[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}$"

# =============================================================================
# PATHS
# =============================================================================

# Path component marking the user's (or a volume's) trash
TRASH_COMPONENT = ".Trash"

# Bundle-id prefixes of browser-generated web-app wrappers
WEB_APP_BUNDLE_PREFIXES = (
    "com.google.Chrome.app.",
    "com.brave.Browser.app.",
    "com.microsoft.edgemac.app.",
    "com.apple.Safari.WebApp.",
)

# Directories whose immediate children are matched against the app.
# "~" is expanded at load time.
DEFAULT_SEARCH_LOCATIONS = (
    "~/Library",
    "~/Library/Application Scripts",
    "~/Library/Application Support",
    "~/Library/Application Support/CrashReporter",
    "~/Library/Containers",
    "~/Library/Group Containers",
    "~/Library/Caches",
    "~/Library/HTTPStorages",
    "~/Library/Internet Plug-Ins",
    "~/Library/LaunchAgents",
    "~/Library/Logs",
    "~/Library/Logs/DiagnosticReports",
    "~/Library/Preferences",
    "~/Library/Preferences/ByHost",
    "~/Library/Saved Application State",
    "~/Library/WebKit",
    "~/Library/Cookies",
    "~/Library/Services",
    "/Library",
    "/Library/Application Support",
    "/Library/Application Support/CrashReporter",
    "/Library/Caches",
    "/Library/Extensions",
    "/Library/Internet Plug-Ins",
    "/Library/LaunchAgents",
    "/Library/LaunchDaemons",
    "/Library/Logs",
    "/Library/Logs/DiagnosticReports",
    "/Library/Preferences",
    "/Library/PrivilegedHelperTools",
    "/Library/Screen Savers",
    "/private/var/db/receipts",
    "/private/var/folders",
    "/Users/Shared",
    "/usr/local/bin",
    "/usr/local/etc",
    "/usr/local/opt",
    "/usr/local/share",
)
