"""End to end tests of the generation pipeline, using the fake key provider."""

import pytest

from wgmeshgen.config import GeneralConfig, MeshDocument, parse_document
from wgmeshgen.generator import enrich_hosts, generate
from wgmeshgen.keys import NaclKeyProvider
from wgmeshgen.models import HostSpec, KeyGenerationError

from conftest import FakeKeyProvider, parse_conf


def spec(n, endpoint=None):
    return HostSpec(
        address=f"10.0.0.{n}/24", allowed_ips=f"10.0.0.{n}/32", endpoint=endpoint
    )


def read_all(tmp_path, document, provider):
    paths = generate(document, provider, base_dir=tmp_path)
    return {p.stem: parse_conf(p.read_text(encoding="utf-8")) for p in paths}


class TestEnrichHosts:
    def test_one_keypair_per_host(self, provider):
        specs = {"a": spec(1), "b": spec(2)}
        hosts = enrich_hosts(specs, provider)
        assert list(hosts) == ["a", "b"]
        assert hosts["a"].spec is specs["a"]
        assert hosts["a"].keys.private_key == "priv-1"
        assert hosts["b"].keys.public_key == "pub-2"
        assert provider.keypair_calls == 2


class TestGenerate:
    def test_example_scenario(self, tmp_path, provider):
        document = parse_document(
            {
                "A": {"address": "10.0.0.1/24", "allowedIPs": "10.0.0.1/32"},
                "B": {
                    "address": "10.0.0.2/24",
                    "allowedIPs": "10.0.0.2/32",
                    "endpoint": "1.2.3.4",
                },
                "__config": {"fullMesh": False, "clientDNS": "9.9.9.9"},
            }
        )
        paths = generate(document, provider, base_dir=tmp_path)
        assert paths == [
            (tmp_path / "output" / "A.conf").resolve(),
            (tmp_path / "output" / "B.conf").resolve(),
        ]
        assert paths[0].read_text(encoding="utf-8") == (
            "[Interface] # A\n"
            "Address = 10.0.0.1/24\n"
            "ListenPort = 51820\n"
            "PrivateKey = priv-1\n"
            "DNS = 9.9.9.9\n"
            "\n"
            "[Peer] # B\n"
            "PublicKey = pub-2\n"
            "PresharedKey = psk-1\n"
            "AllowedIPs = 10.0.0.2/32\n"
            "Endpoint = 1.2.3.4:51820\n"
        )
        assert paths[1].read_text(encoding="utf-8") == (
            "[Interface] # B\n"
            "Address = 10.0.0.2/24\n"
            "ListenPort = 51820\n"
            "PrivateKey = priv-2\n"
            "\n"
            "[Peer] # A\n"
            "PublicKey = pub-1\n"
            "PresharedKey = psk-1\n"
            "AllowedIPs = 10.0.0.1/32\n"
        )
        assert provider.keypair_calls == 2
        assert provider.psk_calls == 1

    def test_full_mesh_every_pair_once(self, tmp_path, provider):
        names = ["a", "b", "c", "d"]
        document = MeshDocument(
            general=GeneralConfig(),
            hosts={name: spec(i, "5.5.5.5" if name == "c" else None) for i, name in enumerate(names, 1)},
        )
        confs = read_all(tmp_path, document, provider)

        for name in names:
            assert set(confs[name]["peers"]) == set(names) - {name}
        for x in names:
            for y in names:
                if x != y:
                    assert (
                        confs[x]["peers"][y]["PresharedKey"]
                        == confs[y]["peers"][x]["PresharedKey"]
                    )
                    # endpoint only where the described peer has one
                    assert ("Endpoint" in confs[x]["peers"][y]) == (y == "c")
        assert provider.psk_calls == 6

    def test_partial_mesh(self, tmp_path, provider):
        document = MeshDocument(
            general=GeneralConfig(full_mesh=False, client_dns="10.0.0.1", listen_port=4000),
            hosts={
                "hub": spec(1, "203.0.113.1"),
                "laptop": spec(2),
                "phone": spec(3),
            },
        )
        confs = read_all(tmp_path, document, provider)

        assert list(confs["hub"]["peers"]) == ["laptop", "phone"]
        assert list(confs["laptop"]["peers"]) == ["hub"]
        assert list(confs["phone"]["peers"]) == ["hub"]
        assert confs["laptop"]["peers"]["hub"]["Endpoint"] == "203.0.113.1:4000"
        assert "Endpoint" not in confs["hub"]["peers"]["laptop"]
        assert confs["laptop"]["interface"]["DNS"] == "10.0.0.1"
        assert confs["phone"]["interface"]["DNS"] == "10.0.0.1"
        assert "DNS" not in confs["hub"]["interface"]
        assert confs["hub"]["interface"]["ListenPort"] == "4000"
        assert provider.psk_calls == 2

    def test_private_keys_never_published(self, tmp_path):
        document = MeshDocument(
            general=GeneralConfig(), hosts={n: spec(i) for i, n in enumerate("abc", 1)}
        )
        confs = read_all(tmp_path, document, NaclKeyProvider())
        private = {c["interface"]["PrivateKey"] for c in confs.values()}
        public = {p["PublicKey"] for c in confs.values() for p in c["peers"].values()}
        assert len(private) == 3
        assert len(public) == 3
        assert not private & public

    def test_rerun_regenerates_keys(self, tmp_path):
        document = MeshDocument(
            general=GeneralConfig(), hosts={"a": spec(1), "b": spec(2, "1.1.1.1")}
        )
        first = read_all(tmp_path, document, NaclKeyProvider())
        second = read_all(tmp_path, document, NaclKeyProvider())

        assert first.keys() == second.keys()
        for name in first:
            assert first[name]["interface"].keys() == second[name]["interface"].keys()
            assert first[name]["peers"].keys() == second[name]["peers"].keys()
            assert (
                first[name]["interface"]["PrivateKey"]
                != second[name]["interface"]["PrivateKey"]
            )
        assert (
            first["a"]["peers"]["b"]["PresharedKey"]
            != second["a"]["peers"]["b"]["PresharedKey"]
        )

    def test_no_hosts_writes_nothing(self, tmp_path, provider):
        document = MeshDocument(general=GeneralConfig(output_dir="out"), hosts={})
        assert generate(document, provider, base_dir=tmp_path) == []
        assert (tmp_path / "out").is_dir()
        assert list((tmp_path / "out").iterdir()) == []

    def test_single_host(self, tmp_path, provider):
        document = MeshDocument(general=GeneralConfig(), hosts={"only": spec(1)})
        confs = read_all(tmp_path, document, provider)
        assert confs["only"]["peers"] == {}
        assert provider.psk_calls == 0

    def test_key_failure_writes_nothing(self, tmp_path):
        class Broken(FakeKeyProvider):
            def generate_keypair(self):
                if self.keypair_calls == 1:
                    raise KeyGenerationError("wg genkey failed")
                return super().generate_keypair()

        document = MeshDocument(
            general=GeneralConfig(), hosts={"a": spec(1), "b": spec(2)}
        )
        with pytest.raises(KeyGenerationError):
            generate(document, Broken(), base_dir=tmp_path)
        assert list((tmp_path / "output").iterdir()) == []
