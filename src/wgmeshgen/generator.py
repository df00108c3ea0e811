"""the generation pipeline: enrich, resolve, render and write"""

import logging
from pathlib import Path

from wgmeshgen.config import MeshDocument
from wgmeshgen.keys import KeyProvider
from wgmeshgen.models import Host, HostSpec
from wgmeshgen.render import (
    load_template,
    prepare_output_dir,
    render_host_config,
    write_host_config,
)
from wgmeshgen.topology import PresharedKeyCache, resolve_mesh

_LOGGER = logging.getLogger(__name__)


def enrich_hosts(hosts: dict[str, HostSpec], provider: KeyProvider) -> dict[str, Host]:
    """attach a freshly generated key pair to every host, order is kept"""
    enriched = {}
    for name, spec in hosts.items():
        _LOGGER.debug("generating key pair for %s", name)
        enriched[name] = Host(name=name, spec=spec, keys=provider.generate_keypair())
    return enriched


def generate(
    document: MeshDocument, provider: KeyProvider, base_dir: Path | None = None
) -> list[Path]:
    """generate one configuration file per host, returns the written files.

    All key pairs are generated before the first file is written. A failure
    aborts the run, files written up to that point are left in place.
    """
    general = document.general
    output_dir = general.resolve_output_dir(base_dir or Path.cwd())
    prepare_output_dir(output_dir)

    hosts = enrich_hosts(document.hosts, provider)
    cache = PresharedKeyCache(provider.generate_preshared_key)
    template = load_template()

    written = []
    for resolved in resolve_mesh(hosts, general, cache):
        lines = render_host_config(
            resolved, general.listen_port, general.client_dns, template=template
        )
        written.append(write_host_config(output_dir, resolved.name, lines))
    _LOGGER.info(
        "%d host configurations written, %d preshared keys generated",
        len(written),
        len(cache),
    )
    return written
