"""key material for the mesh: identity key pairs and preshared keys"""

import base64
import logging
import subprocess
from typing import Protocol

import nacl.utils
from nacl.public import PrivateKey

from wgmeshgen.models import ConfigError, KeyGenerationError, KeyPair

_LOGGER = logging.getLogger(__name__)

WG_COMMAND = "wg"
PSK_LENGTH = 32


class KeyProvider(Protocol):
    """source of key material, every call yields fresh keys"""

    def generate_keypair(self) -> KeyPair: ...

    def generate_preshared_key(self) -> str: ...


class WgKeyProvider:
    """generates keys by running wg(8), which needs to be installed"""

    def __init__(self, command: str = WG_COMMAND):
        self.command = command

    def _run(self, *args: str, stdin: str | None = None) -> str:
        cmd = [self.command, *args]
        try:
            proc = subprocess.run(
                cmd, input=stdin, capture_output=True, text=True, check=True
            )
        except FileNotFoundError as exc:
            raise KeyGenerationError(f"{self.command} not found, is wireguard-tools installed?") from exc
        except subprocess.CalledProcessError as exc:
            raise KeyGenerationError(
                f"'{' '.join(cmd)}' failed with exit code {exc.returncode}: {exc.stderr.strip()}"
            ) from exc
        out = proc.stdout.strip()
        if not out:
            raise KeyGenerationError(f"'{' '.join(cmd)}' returned no output")
        return out

    def generate_keypair(self) -> KeyPair:
        private_key = self._run("genkey")
        # pubkey reads the private key from stdin
        public_key = self._run("pubkey", stdin=private_key + "\n")
        return KeyPair(private_key=private_key, public_key=public_key)

    def generate_preshared_key(self) -> str:
        return self._run("genpsk")


class NaclKeyProvider:
    """generates Curve25519 keys in process with PyNaCl, same encoding as wg"""

    def generate_keypair(self) -> KeyPair:
        private_key = PrivateKey.generate()
        return KeyPair(
            private_key=_b64(bytes(private_key)),
            public_key=_b64(private_key.public_key.encode()),
        )

    def generate_preshared_key(self) -> str:
        return _b64(nacl.utils.random(PSK_LENGTH))


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode()


KEY_BACKENDS = {
    "wg": WgKeyProvider,
    "nacl": NaclKeyProvider,
}


def get_key_provider(name: str) -> KeyProvider:
    """return the key provider registered under the given name"""
    try:
        backend = KEY_BACKENDS[name]
    except KeyError as exc:
        raise ConfigError(
            f"unknown key backend: {name}, valid are {', '.join(KEY_BACKENDS)}"
        ) from exc
    _LOGGER.debug("using key backend %s", name)
    return backend()
