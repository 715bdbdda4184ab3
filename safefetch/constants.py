"""Global constants and default configurations for safefetch."""

# Copy buffer used for every stream-to-file copy
DEFAULT_CHUNK_SIZE = 1024 * 1024

CONFIG_DIR_NAME = "safefetch"
CONFIG_FILE_NAME = "config.yaml"

# Default configuration
DEFAULT_CONFIG = {
    "timeout": None,
    "verify_ssl": True,
    "chunk_size": DEFAULT_CHUNK_SIZE,
    "strict_entry_names": True,
    "preserve_permissions": False,
    "user_agent": "",  # Filled from the package version when empty
}

# Expected value types per config key; None is only accepted for timeout
CONFIG_TYPES = {
    "timeout": (int, float),
    "verify_ssl": (bool,),
    "chunk_size": (int,),
    "strict_entry_names": (bool,),
    "preserve_permissions": (bool,),
    "user_agent": (str,),
}

SUPPORTED_SCHEMES = ('http', 'https', 'file')

# Address suffixes, checked in order (longest first)
FORMAT_SUFFIXES = (
    ('.tar.gz', 'gzip_tar'),
    ('.tgz', 'gzip_tar'),
    ('.zip', 'zip'),
    ('.gz', 'gzip'),
)

# System name mappings
SYSTEM_MAP = {
    'Darwin': 'macos',
    'Windows': 'windows',
    'Linux': 'linux',
    'FreeBSD': 'freebsd'
}

ARCH_MAP = {
    'x86_64': 'x64',
    'amd64': 'x64',
    'aarch64': 'arm64',
    'arm64': 'arm64'
}
