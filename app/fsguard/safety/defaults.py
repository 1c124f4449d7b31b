"""Built-in policy entries that configuration can extend but never remove.

Three fixed system-path sets exist (generic POSIX, macOS, Windows). User
critical paths are derived from the home directory and the host platform.
"""

import os
from pathlib import Path

SYSTEM_PROTECTED_PATHS_POSIX: tuple[str, ...] = (
    "/",
    "/bin",
    "/boot",
    "/dev",
    "/etc",
    "/lib",
    "/lib64",
    "/opt",
    "/proc",
    "/root",
    "/run",
    "/sbin",
    "/srv",
    "/sys",
    "/usr",
    "/var",
)

SYSTEM_PROTECTED_PATHS_MACOS: tuple[str, ...] = (
    *SYSTEM_PROTECTED_PATHS_POSIX,
    "/System",
    "/Library",
    "/Applications",
    "/Volumes",
    "/private",
)

SYSTEM_PROTECTED_PATHS_WINDOWS: tuple[str, ...] = (
    "C:\\Windows",
    "C:\\Program Files",
    "C:\\Program Files (x86)",
    "C:\\ProgramData",
)

# Regex sources matched (re.search) against the final path component only.
PROTECTED_NAME_PATTERNS: tuple[str, ...] = (
    # Version control
    r"^\.git$",
    # Credential directories
    r"^\.ssh$",
    r"^\.gnupg$",
    r"^\.aws$",
    # Environment files
    r"^\.env$",
    r"^\.env\..+$",
    # Private keys
    r"^id_rsa$",
    r"^id_ed25519$",
    r"^.*\.pem$",
    # Secret-like names
    r"^credentials$",
    r"^secrets?$",
)

# Allow-list used when the configuration does not set one (relative to home).
DEFAULT_ALLOWED_SUBDIRS: tuple[str, ...] = (
    "projects",
    "Projects",
    "dev",
    "Development",
    "workspace",
    "Workspace",
    "code",
    "Code",
    "tmp",
    "temp",
)


def system_protected_paths(platform: str) -> tuple[str, ...]:
    """Select the fixed system-path set for a platform.

    Args:
        platform: A sys.platform value ("linux", "darwin", "win32", ...).

    Returns:
        Tuple of absolute system paths.
    """
    if platform == "darwin":
        return SYSTEM_PROTECTED_PATHS_MACOS
    if platform == "win32":
        return SYSTEM_PROTECTED_PATHS_WINDOWS
    return SYSTEM_PROTECTED_PATHS_POSIX


def user_protected_paths(platform: str, home: Path | None = None) -> tuple[str, ...]:
    """Build the fixed user-critical paths for a platform.

    The home directory itself is always protected, together with the
    credential and config directories and the standard personal folders.

    Args:
        platform: A sys.platform value.
        home: Home directory. Defaults to Path.home().

    Returns:
        Tuple of absolute paths.
    """
    home = home or Path.home()
    names = [".ssh", ".gnupg", ".aws", ".config"]

    if platform == "darwin":
        names += ["Library", "Desktop", "Documents", "Downloads", "Pictures", "Music", "Movies"]
    elif platform == "win32":
        names += ["Desktop", "Documents", "Downloads", "AppData"]
    else:
        names += ["Desktop", "Documents", "Downloads"]

    return (str(home), *(os.path.join(home, name) for name in names))


def default_allowed_paths(home: Path | None = None) -> list[str]:
    """Default allow-list: common work folders below home, never home itself."""
    home = home or Path.home()
    return [os.path.join(home, name) for name in DEFAULT_ALLOWED_SUBDIRS]
