"""configuration renderer and writer"""

import logging
import os
from pathlib import Path

from jinja2 import (
    Environment,
    PackageLoader,
    Template,
    TemplateNotFound,
    select_autoescape,
)

from wgmeshgen.models import ResolvedHost, WgMeshError

_LOGGER = logging.getLogger(__name__)

J2SUFFIX = ".jinja2"
DEFAULT_TEMPLATE = "wireguard.conf"
CONF_SUFFIX = ".conf"


def load_template(name: str = DEFAULT_TEMPLATE) -> Template:
    """load the template from the package"""
    env = Environment(
        loader=PackageLoader("wgmeshgen"), autoescape=select_autoescape()
    )
    try:
        return env.get_template(f"{name}{J2SUFFIX}")
    except TemplateNotFound as exc:
        raise WgMeshError(f"template does not exist: {name}") from exc


def render_host_config(
    resolved: ResolvedHost,
    listen_port: int,
    client_dns: str | None,
    template: Template | None = None,
) -> list[str]:
    """render the interface block and one block per peer, returns the lines
    of the configuration file. Every block is followed by an empty line."""
    if template is None:
        template = load_template()
    text = template.render(
        host=resolved.host,
        listen_port=listen_port,
        dns=client_dns if resolved.dns else None,
        peers=resolved.peers,
    )
    return text.split("\n")


def prepare_output_dir(output_dir: Path):
    """create the output directory including its parents"""
    _LOGGER.info('Writing output to "%s"', output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)


def _private_opener(path, flags):
    fd = os.open(path, flags, 0o600)
    # an existing file keeps its mode on open
    os.fchmod(fd, 0o600)
    return fd


def write_host_config(output_dir: Path, name: str, lines: list[str]) -> Path:
    """write the lines to <output_dir>/<name>.conf, the file holds a private
    key so it is only readable by the owner"""
    path = output_dir / f"{name}{CONF_SUFFIX}"
    with open(path, "w", encoding="utf-8", opener=_private_opener) as handle:
        handle.write("\n".join(lines))
    _LOGGER.info('Wrote host configuration for %s to "%s"', name, path)
    return path
