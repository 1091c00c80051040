"""Core constants for modkeeper.

This module defines constants used throughout the engine:
- Unique-name allocation limits
- Sidecar directory and artifact suffixes
- Fetch configuration
- Environment variable names
"""

# ============================================================================
# Unique Name Allocation
# ============================================================================

#: Highest collision counter tried before accepting the original target
MAX_UNIQUE_ATTEMPTS: int = 999

# ============================================================================
# Sidecar Directories and Artifacts
# ============================================================================

#: Suffix of the directory holding disabled mods (Mods -> Mods.disabled)
DISABLED_SUFFIX: str = ".disabled"

#: Suffix of the directory holding replaced mod versions (Mods -> Mods.backup)
BACKUP_SUFFIX: str = ".backup"

#: Suffixes replaced (rather than appended to) when deriving a sidecar name
SIDECAR_SUFFIXES: tuple[str, ...] = (DISABLED_SUFFIX, BACKUP_SUFFIX)

#: Appended to a filename when it is moved into the backup directory
BACKUP_FILE_SUFFIX: str = ".bak"

#: Extension given to in-flight downloads (foo.jar -> foo.tmp)
TEMP_SUFFIX: str = ".tmp"

#: Directory inside the backup directory holding update intents
JOURNAL_DIRNAME: str = ".journal"

#: Marker file used to probe directory writability
WRITE_PROBE_FILENAME: str = ".modkeeper_write_test"

# ============================================================================
# Fetch Configuration
# ============================================================================

#: Maximum HTTP redirects followed by a single fetch
MAX_REDIRECTS: int = 10

# ============================================================================
# Store Configuration
# ============================================================================

#: File holding installed-mod records inside the data directory
INSTALLED_MODS_FILENAME: str = "installed_mods.json"

#: File holding profile records inside the data directory
PROFILES_FILENAME: str = "profiles.json"

# ============================================================================
# Environment Variables
# ============================================================================

#: Enables debug() output when set to 1/true/yes
ENV_DEBUG: str = "MODKEEPER_DEBUG"

#: Overrides the store directory (default ~/.modkeeper)
ENV_DATA_DIR: str = "MODKEEPER_DATA_DIR"

#: Default active Mods directory for CLI commands
ENV_MODS_DIR: str = "MODKEEPER_MODS_DIR"
