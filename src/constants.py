"""Constants used in the project."""

import os
from enum import Enum
from types import MappingProxyType


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    NOT_FOUND = 4
    MALFORMED_MANIFEST = 5
    LICENSE_CONFLICT = 6


class AssetTypes(Enum):
    """Marketplace asset types referenced by the resolver.

    Args:
        Enum (string): Asset type identifiers from the gallery API.
    """

    CODE_MANIFEST = "Microsoft.VisualStudio.Code.Manifest"
    LICENSE = "Microsoft.VisualStudio.Services.Content.License"
    VSIX_PACKAGE = "Microsoft.VisualStudio.Services.VSIXPackage"


# Extensions whose id changed on the marketplace; packs must reference the new id.
DEPRECATED_EXTENSIONS = MappingProxyType({
    "peterjausovec.vscode-docker": "ms-azuretools.vscode-docker",
})

# Extensions that cannot be published to Open VSX because they are not open source.
# https://github.com/wallabyjs/public/issues/2436#issuecomment-741415194
INELIGIBLE_EXTENSIONS = frozenset({
    "wallabyjs.quokka-vscode",
})


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    MARKETPLACE_QUERY_URL = "https://marketplace.visualstudio.com/_apis/public/gallery/extensionquery"
    MARKETPLACE_ITEM_URL = "https://marketplace.visualstudio.com/items?itemName="
    # filterType 7 = ExtensionName; flags 103 = versions, files, categories, shared accounts, asset uri
    MARKETPLACE_FILTER_EXTENSION_NAME = 7
    MARKETPLACE_QUERY_FLAGS = 103
    MARKETPLACE_PAGE_SIZE = 100
    MARKETPLACE_HEADERS = {
        "Accept": "application/json;api-version=6.1-preview.1;excludeUrls=true",
        "Content-Type": "application/json",
        "X-Requested-With": "XMLHttpRequest",
        "X-Vss-Reauthenticationaction": "Suppress",
        "Accept-Language": "en-US,en;q=0.9",
    }

    OPENVSX_API_URL = "https://open-vsx.org/api"
    OPENVSX_ITEM_URL = "https://open-vsx.org/extension"
    OPENVSX_SNAPSHOT_URL = (
        "https://raw.githubusercontent.com/open-vsx/publish-extensions/master/extensions.json"
    )
    OPENVSX_SNAPSHOT_FILE = os.path.join(".tmp", "extensions.json")

    EXTENSIONS_FILE = "extensions.json"
    PACKAGE_JSON_FILE = "package.json"
    INELIGIBLE_REFERENCE_URL = "https://github.com/wallabyjs/public/issues/2436#issuecomment-741415194"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    MAX_CONCURRENCY = 8
    HTTP_CACHE_TTL_SEC = 300
    GIT_CLONE_TIMEOUT = 300

    # Repository API constants
    GITHUB_API_BASE = "https://api.github.com"
    GITLAB_API_BASE = "https://gitlab.com/api/v4"
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    ENV_GITLAB_TOKEN = "GITLAB_TOKEN"

    CONFIG_LOCATIONS = [
        "vsxaudit.yml",
        "vsxaudit.yaml",
        os.path.join("~", ".config", "vsxaudit", "config.yml"),
    ]
