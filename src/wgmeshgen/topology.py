"""
WgMeshGen Topology - Peer Resolution and Preshared Key Pairing

PURPOSE:
    Decides for every ordered pair (host, candidate) whether candidate gets a
    peer block in the configuration of host, whether host gets a DNS line,
    and hands out exactly one preshared key per unordered pair of hosts.

TOPOLOGY MODES:
    - Full mesh (default, fullMesh anything but false): every host peers
      with every other host.
    - Partial mesh / hub-spoke (fullMesh: false): two hosts peer only if at
      least one of them has an endpoint. Hosts without an endpoint (spokes)
      reach each other through the endpoint hosts (hubs). Two hubs peer with
      each other directly.

DNS:
    A host gets "DNS = <clientDNS>" only in partial mesh mode, only if it
    has no endpoint itself and only if clientDNS is configured.
"""

import logging
from typing import Callable

from wgmeshgen.config import GeneralConfig
from wgmeshgen.models import Host, PeerLink, ResolvedHost

_LOGGER = logging.getLogger(__name__)


class PresharedKeyCache:
    """one preshared key per unordered pair of host names, created on first
    use. A cache lives for exactly one run."""

    def __init__(self, generate: Callable[[], str]):
        self._generate = generate
        self._keys: dict[tuple[str, str], str] = {}

    @staticmethod
    def pair_key(name_a: str, name_b: str) -> tuple[str, str]:
        low, high = sorted((name_a, name_b))
        return low, high

    def get_or_create(self, name_a: str, name_b: str) -> str:
        key = self.pair_key(name_a, name_b)
        if key not in self._keys:
            _LOGGER.debug("generating preshared key for %s and %s", *key)
            self._keys[key] = self._generate()
        return self._keys[key]

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, pair: tuple[str, str]) -> bool:
        return self.pair_key(*pair) in self._keys


def should_peer(host: Host, candidate: Host, general: GeneralConfig) -> bool:
    """does candidate get a peer block in the configuration of host"""
    if candidate.name == host.name:
        return False
    if general.is_full_mesh:
        return True
    return host.has_endpoint or candidate.has_endpoint


def wants_dns(host: Host, general: GeneralConfig) -> bool:
    """does host get the client DNS line in its interface block"""
    return (
        not general.is_full_mesh
        and not host.has_endpoint
        and general.client_dns is not None
    )


def resolve_peers(
    host: Host,
    hosts: dict[str, Host],
    general: GeneralConfig,
    cache: PresharedKeyCache,
) -> list[PeerLink]:
    """the peers of host in document order"""
    return [
        PeerLink(host=candidate, preshared_key=cache.get_or_create(host.name, name))
        for name, candidate in hosts.items()
        if should_peer(host, candidate, general)
    ]


def resolve_mesh(
    hosts: dict[str, Host], general: GeneralConfig, cache: PresharedKeyCache
) -> list[ResolvedHost]:
    """resolve peers and DNS for every host, in document order"""
    resolved = []
    for host in hosts.values():
        peers = resolve_peers(host, hosts, general, cache)
        _LOGGER.debug(
            "%s peers with %s", host.name, ", ".join(p.name for p in peers) or "nobody"
        )
        resolved.append(
            ResolvedHost(host=host, peers=peers, dns=wants_dns(host, general))
        )
    return resolved
