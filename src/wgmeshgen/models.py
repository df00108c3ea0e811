"""
WgMeshGen Data Models - Core Data Structures for Mesh Generation

PURPOSE:
    Defines the data models used throughout wgmeshgen for representing the
    hosts of a mesh, their generated key material and the resolved peer
    relationships, plus the exception hierarchy.

WHO READS ME:
    - config.py: Builds HostSpec entries from the input document
    - keys.py: Returns KeyPair instances, raises KeyGenerationError
    - topology.py: Consumes Host, produces PeerLink and ResolvedHost
    - render.py: Renders ResolvedHost into configuration lines
    - main.py: Uses WgMeshError for exception handling

WHO I READ:
    - None (leaf module, no internal dependencies)

DEPENDENCIES:
    - dataclasses: @dataclass decorator
    - serde: @deserialize/@serialize, field(rename=...) for document keys

KEY EXPORTS:
    - WgMeshError: Base exception class for all wgmeshgen errors
    - UsageError, ConfigError, KeyGenerationError: error taxonomy
    - HostSpec: One host entry of the input document (immutable)
    - KeyPair: Private/public identity key pair of a host
    - Host: HostSpec enriched with its generated KeyPair
    - PeerLink: A peer as seen from one host, with the pair's preshared key
    - ResolvedHost: A host with its ordered peers and DNS decision

DATA MODELS:

    HostSpec:
        - address: str (interface address, e.g. "10.0.0.1/24")
        - allowed_ips: str (document key "allowedIPs")
        - endpoint: str | None (reachable address, port appended on render)

    Host:
        - name: str (document key, also the output file stem)
        - spec: HostSpec
        - keys: KeyPair
"""

from dataclasses import dataclass, field

from serde import deserialize, serialize
from serde import field as serde_field


class WgMeshError(Exception):
    """Base class for all errors raised by wgmeshgen"""


class UsageError(WgMeshError):
    """the program was invoked with the wrong arguments"""


class ConfigError(WgMeshError):
    """the host description document is missing or malformed"""


class KeyGenerationError(WgMeshError):
    """the key material primitive failed"""


@deserialize
@serialize
@dataclass(frozen=True)
class HostSpec:
    """a host as described in the input document"""

    address: str
    allowed_ips: str = serde_field(rename="allowedIPs")
    endpoint: str | None = None

    @property
    def has_endpoint(self) -> bool:
        """True if the host can be reached directly, i.e. acts as a hub"""
        return self.endpoint is not None


@dataclass(frozen=True)
class KeyPair:
    """identity key pair of a host, both base64 encoded"""

    private_key: str
    public_key: str


@dataclass(frozen=True)
class Host:
    """a host of the mesh with its generated key pair"""

    name: str
    spec: HostSpec
    keys: KeyPair

    @property
    def endpoint(self) -> str | None:
        return self.spec.endpoint

    @property
    def has_endpoint(self) -> bool:
        return self.spec.has_endpoint


@dataclass(frozen=True)
class PeerLink:
    """a peer relationship from the point of view of one host"""

    host: Host
    preshared_key: str

    @property
    def name(self) -> str:
        return self.host.name


@dataclass
class ResolvedHost:
    """a host together with everything needed to render its configuration"""

    host: Host
    peers: list[PeerLink] = field(default_factory=list)
    dns: bool = False

    @property
    def name(self) -> str:
        return self.host.name
