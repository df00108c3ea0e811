"""
WgMeshGen Configuration - Host Description Loading and Defaults Management

PURPOSE:
    Loads the host description document, validates that it is a mapping and
    decomposes it into the general settings (stored under the reserved key
    "__config") and an ordered mapping of host name to HostSpec. The reserved
    key never leaves this module as a host.

WHO READS ME:
    - main.py: Loads the document via load_document() during bootstrap
    - generator.py: Uses GeneralConfig for port, output directory, topology
    - topology.py: Uses GeneralConfig for the full mesh and DNS decisions

WHO I READ:
    - models.py: HostSpec, ConfigError

DEPENDENCIES:
    - serde: dataclass (de)serialization (@deserialize, @serialize, from_dict)
    - serde.json, serde.toml: document parsing, chosen by file suffix
    - logging: loading status messages

KEY EXPORTS:
    - GENERAL_CONFIG_KEY: reserved top-level key holding the general settings
    - GeneralConfig: dataclass containing the general settings
    - MeshDocument: general settings plus the ordered host mapping
    - load_document(filename): read and decompose a document file
    - parse_document(data): decompose an already parsed mapping

CONFIG PARAMETERS:
    - listenPort: port for ListenPort and every Endpoint (default: 51820)
    - outputDir: directory for the generated files (default: ./output)
    - fullMesh: every host peers with every other host (default: true)
    - clientDNS: DNS server for endpoint-less hosts in partial mesh mode
    - keyBackend: "wg" (default, wg(8) binary) or "nacl" (PyNaCl)
    - logLevel: log level applied once the document is loaded

FILE FORMAT:
    hosts.json example:
    ```json
    {
        "hub": {"address": "10.0.0.1/24", "allowedIPs": "10.0.0.1/32",
                "endpoint": "203.0.113.1"},
        "laptop": {"address": "10.0.0.2/24", "allowedIPs": "10.0.0.2/32"},
        "__config": {"fullMesh": false, "clientDNS": "10.0.0.1"}
    }
    ```
    The same structure can be written as TOML (file suffix ".toml").
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from serde import SerdeError, deserialize, field, from_dict, serialize
from serde.json import from_json
from serde.toml import from_toml

from wgmeshgen.models import ConfigError, HostSpec

_LOGGER = logging.getLogger(__name__)

GENERAL_CONFIG_KEY = "__config"
DEFAULT_LISTEN_PORT = 51820
DEFAULT_OUTPUT_DIR = "./output"


@deserialize
@serialize
@dataclass
class GeneralConfig:
    """mesh wide settings"""

    listen_port: int = field(default=DEFAULT_LISTEN_PORT, rename="listenPort")
    output_dir: str = field(default=DEFAULT_OUTPUT_DIR, rename="outputDir")
    # any value but a literal false means full mesh, so it is not type checked
    full_mesh: Any = field(default=True, rename="fullMesh")
    client_dns: str | None = field(default=None, rename="clientDNS")
    key_backend: str = field(default="wg", rename="keyBackend")
    log_level: str | None = field(default=None, rename="logLevel")

    @property
    def is_full_mesh(self) -> bool:
        # only a literal false switches to hub/spoke
        return self.full_mesh is not False

    def resolve_output_dir(self, base_dir: Path) -> Path:
        """the output directory. Relative paths are taken from base_dir, which the
        CLI sets to the current working directory, not the install location."""
        return (base_dir / self.output_dir).resolve()


@dataclass
class MeshDocument:
    """a decomposed host description document"""

    general: GeneralConfig
    hosts: dict[str, HostSpec]


def _decode(cls, data: Any, what: str):
    if not isinstance(data, dict):
        raise ConfigError(f"{what} is not an object: {data!r}")
    try:
        return from_dict(cls, data)
    except (SerdeError, KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"invalid {what}: {exc}") from exc


def parse_document(data: Any) -> MeshDocument:
    """split a parsed document into general settings and host entries"""
    if data is None or not isinstance(data, dict):
        raise ConfigError("Config is not an object or null")

    general = _decode(
        GeneralConfig, data.get(GENERAL_CONFIG_KEY) or {}, "general settings"
    )
    hosts = {
        name: _decode(HostSpec, entry, f"host {name}")
        for name, entry in data.items()
        if name != GENERAL_CONFIG_KEY
    }
    _LOGGER.debug("found %d hosts: %s", len(hosts), ", ".join(hosts))
    return MeshDocument(general=general, hosts=hosts)


def load_document(filename: str | Path) -> MeshDocument:
    """load and validate the host description document from the given file"""
    path = Path(filename)
    reader = from_toml if path.suffix == ".toml" else from_json
    try:
        with open(path, encoding="utf-8") as handle:
            data = reader(Any, handle.read())
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {path}") from exc
    except (SerdeError, ValueError) as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc
    document = parse_document(data)
    _LOGGER.info("Configuration loaded from file %s", path)
    return document
