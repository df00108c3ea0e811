"""
Shared fixtures for the wgmeshgen tests.

FakeKeyProvider hands out predictable, unique keys and counts how often it
is asked, so tests can check both the rendered values and the call budget.
"""

import pytest

from wgmeshgen.config import GeneralConfig
from wgmeshgen.models import Host, HostSpec, KeyPair


class FakeKeyProvider:
    def __init__(self):
        self.keypair_calls = 0
        self.psk_calls = 0

    def generate_keypair(self) -> KeyPair:
        self.keypair_calls += 1
        n = self.keypair_calls
        return KeyPair(private_key=f"priv-{n}", public_key=f"pub-{n}")

    def generate_preshared_key(self) -> str:
        self.psk_calls += 1
        return f"psk-{self.psk_calls}"


def make_host(name, address, allowed_ips, endpoint=None) -> Host:
    return Host(
        name=name,
        spec=HostSpec(address=address, allowed_ips=allowed_ips, endpoint=endpoint),
        keys=KeyPair(private_key=f"priv-{name}", public_key=f"pub-{name}"),
    )


def make_hosts(*entries) -> dict[str, Host]:
    """entries are (name, endpoint) tuples, addresses are numbered"""
    hosts = {}
    for i, (name, endpoint) in enumerate(entries, start=1):
        hosts[name] = make_host(name, f"10.0.0.{i}/24", f"10.0.0.{i}/32", endpoint)
    return hosts


def parse_conf(text: str) -> dict:
    """split a rendered configuration into its interface block and a mapping
    of peer name to peer block, each block a dict of key to value"""
    interface = None
    peers = {}
    current = None
    for line in text.split("\n"):
        if line.startswith("[Interface] # "):
            current = interface = {"name": line[len("[Interface] # "):]}
        elif line.startswith("[Peer] # "):
            name = line[len("[Peer] # "):]
            assert name not in peers, f"duplicate peer block for {name}"
            current = peers[name] = {}
        elif line:
            key, value = line.split(" = ", 1)
            current[key] = value
    return {"interface": interface, "peers": peers}


@pytest.fixture
def provider():
    return FakeKeyProvider()


@pytest.fixture
def full_mesh():
    return GeneralConfig()


@pytest.fixture
def partial_mesh():
    return GeneralConfig(full_mesh=False, client_dns="9.9.9.9")
