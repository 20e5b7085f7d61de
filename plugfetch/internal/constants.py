# ---------------------------------------------------------------------
# Application identity
# ---------------------------------------------------------------------

APP_NAME = "plugfetch"
USER_AGENT_SUFFIX = "via plugfetch"

# ---------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------

ARTIFACT_EXTENSION = ".jar"
DOWNLOAD_CHUNK_SIZE = 8192
PARTIAL_SUFFIX = ".part"

# ---------------------------------------------------------------------
# Platform endpoints
# ---------------------------------------------------------------------

MODRINTH_VERSIONS_URL = "https://api.modrinth.com/v2/project/{project}/version"
MODRINTH_LOADERS = ("spigot", "paper", "purpur")

SPIGET_RESOURCE_URL = "https://api.spiget.org/v2/resources/{resource}"
SPIGET_DOWNLOAD_SEGMENT = "/download"

BUKKIT_LATEST_URL = "https://dev.bukkit.org/projects/{project}/files/latest"

# ---------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------

CONNECT_TIMEOUT_SECONDS = 10.0
READ_TIMEOUT_SECONDS = 60.0
