"""Global constants for mobilectl"""

from enum import Enum
import re

APP_NAME = "mobilectl"
LOG_FORMAT = "%(message)s"

# Configuration discovery
DEFAULT_CONFIG_FILE = "mobileops.yml"
CONFIG_FILE_CANDIDATES = [
    "mobileops.yml",
    "mobileops.yaml",
    ".mobilectl/mobileops.yml",
    ".mobilectl/mobileops.yaml",
]

# Working state directory
STATE_DIR = ".mobilectl"
VERSION_BACKUP_DIR = ".mobilectl/backups"
CHANGELOG_BACKUP_DIR = ".mobilectl/changelog-backups"
CHANGELOG_STATE_FILE = ".mobilectl/changelog-state.json"
CHANGELOG_BACKUP_KEEP = 10

# Files copied into a version backup when present
VERSION_BACKUP_FILES = [
    "app/build.gradle.kts",
    "app/build.gradle",
    "build.gradle.kts",
    "build.gradle",
    "package.json",
    "mobileops.yml",
    "mobileops.yaml",
]

BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
CHANGELOG_BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S-%f"


class Platform(Enum):
    ANDROID = "android"
    IOS = "ios"


class DestinationType(Enum):
    FIREBASE = "firebase"
    PLAY_CONSOLE = "play-console"
    LOCAL = "local"
    TESTFLIGHT = "testflight"
    APP_STORE = "app-store"


class ArtifactType(Enum):
    APK = "apk"
    AAB = "aab"
    IPA = "ipa"


# Destinations reachable from each platform, in attempt order
PLATFORM_DESTINATIONS = {
    Platform.ANDROID: [
        DestinationType.FIREBASE,
        DestinationType.PLAY_CONSOLE,
        DestinationType.LOCAL,
    ],
    Platform.IOS: [
        DestinationType.TESTFLIGHT,
        DestinationType.APP_STORE,
    ],
}

# Synthetic output locations reported by a dry-run build
DRY_RUN_OUTPUT_PATHS = {
    Platform.ANDROID: "build/outputs/apk/release/",
    Platform.IOS: "build/outputs/ipa/",
}

DEFAULT_ANDROID_ARTIFACT = "build/outputs/apk/release/app-release.apk"
DEFAULT_IOS_ARTIFACT = "build/outputs/ipa/release/app.ipa"
DEFAULT_LOCAL_DEPLOY_DIR = "build/deploy"
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB

# Version management
BUMP_LEVELS = ("major", "minor", "patch")
BUMP_STRATEGIES = ("patch", "minor", "major", "auto", "manual")

# Changelog
CHANGELOG_FORMATS = ("markdown", "html", "json")
OTHER_COMMIT_TYPE = "other"
MAX_LISTED_CONTRIBUTORS = 10

REPORT_FORMATS = ("html", "json", "markdown")


# Error codes
class ErrorCode:
    CONFIG_ERROR = "MC001"
    CONFIG_PARSE_ERROR = "MC002"
    VALIDATION_FAILED = "MC003"
    NO_PLATFORM_DETECTED = "MC004"
    BUILD_FAILED = "MC005"
    SIGNING_FAILED = "MC006"
    DEPLOY_FAILED = "MC007"
    DESTINATION_ERROR = "MC008"
    VERSION_ERROR = "MC009"
    BACKUP_FAILED = "MC010"
    CHANGELOG_ERROR = "MC011"
    GIT_ERROR = "MC012"
    PROCESS_FAILED = "MC013"


# Environment variables
ENV_KEYSTORE = "MOBILECTL_KEYSTORE"
ENV_KEY_ALIAS = "MOBILECTL_KEY_ALIAS"
ENV_KEY_PASSWORD = "MOBILECTL_KEY_PASSWORD"
ENV_STORE_PASSWORD = "MOBILECTL_STORE_PASSWORD"
ENV_CONFIG_PATH = "MOBILECTL_CONFIG"
ENV_ANDROID_HOME = "ANDROID_HOME"
ENV_ANDROID_SDK_ROOT = "ANDROID_SDK_ROOT"
ENV_GOOGLE_CREDENTIALS = "GOOGLE_APPLICATION_CREDENTIALS"

# Validation patterns
VERSION_PATTERN = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"$"
)
CONVENTIONAL_COMMIT_PATTERN = re.compile(
    r"^(?P<type>\w+)(?:\((?P<scope>[^)]+)\))?(?P<breaking>!)?:\s*(?P<description>.+)$"
)
BREAKING_FOOTER_PATTERN = re.compile(r"^BREAKING[ -]CHANGE:\s*(?P<detail>.*)$", re.MULTILINE)
ENV_PLACEHOLDER_PATTERN = re.compile(r"^\$\{?[A-Za-z_][A-Za-z0-9_]*\}?$")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_INFO = "ℹ"
EMOJI_ARROW = "→"
EMOJI_PACKAGE = "📦"
EMOJI_ROCKET = "🚀"
EMOJI_LOCK = "🔐"

# Message templates
MSG_NO_PLATFORMS = "No platforms to build. Enable Android or iOS in config."
MSG_BACKUP_FAILED = "Backup failed: {error}"
MSG_CONFIG_UPDATE_FAILED = "Failed to update config"
