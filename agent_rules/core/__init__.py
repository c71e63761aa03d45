"""Installation engine for agent-rules bundles."""

from .backup import BackupRecord, backup_path_for, maybe_backup, plan_backup
from .bundle import Bundle, BundleFile, load_bundle, parse_bundle, verify_checksum
from .differ import BINARY_DIFF_MARKER, Classification, classify, create_diff_preview, is_likely_text
from .errors import (
    BlockingConflictError,
    ChecksumMismatchError,
    InstallError,
    MalformedBundleError,
    PathSafetyViolation,
    UnknownPlatformError,
    UnsupportedInstallModeError,
)
from .installer import FileOutcome, FileStatus, InstallOptions, InstallReport, install, raise_for_conflicts
from .platforms import PLATFORMS, PlatformConfig, build_platform_table, get_platform, normalize_platform_input
from .target import InstallMode, InstallTarget, resolve_install_target
from .translator import CONFIG_DIR_NAME, PATH_LAYOUT_VERSION, destination

__all__ = [
    "BINARY_DIFF_MARKER",
    "CONFIG_DIR_NAME",
    "PATH_LAYOUT_VERSION",
    "PLATFORMS",
    "BackupRecord",
    "BlockingConflictError",
    "Bundle",
    "BundleFile",
    "ChecksumMismatchError",
    "Classification",
    "FileOutcome",
    "FileStatus",
    "InstallError",
    "InstallMode",
    "InstallOptions",
    "InstallReport",
    "InstallTarget",
    "MalformedBundleError",
    "PathSafetyViolation",
    "PlatformConfig",
    "UnknownPlatformError",
    "UnsupportedInstallModeError",
    "backup_path_for",
    "build_platform_table",
    "classify",
    "create_diff_preview",
    "destination",
    "get_platform",
    "install",
    "is_likely_text",
    "load_bundle",
    "maybe_backup",
    "normalize_platform_input",
    "parse_bundle",
    "plan_backup",
    "raise_for_conflicts",
    "resolve_install_target",
    "verify_checksum",
]
