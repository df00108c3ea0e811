"""
WgMeshGen - WireGuard mesh configuration generator

Reads a host description document and writes one WireGuard configuration
file per host, either as a full mesh or as hub/spoke (partial mesh).

Package Structure:
    - main.py: CLI entry point and argument parsing
    - config.py: Document loading, general settings
    - models.py: Data models (hosts, key pairs, peer links) and errors
    - keys.py: Key pair and preshared key generation (wg(8) or PyNaCl)
    - topology.py: Peer resolution and preshared key pairing
    - render.py: Jinja2 rendering and file output
    - generator.py: The pipeline tying it all together
    - colorlog.py: Colored log output formatter
    - templates/: Jinja2 template for the configuration files

Entry Points:
    - wgmeshgen: CLI command (calls main.main())
    - python -m wgmeshgen: Direct module execution

Public API Exports:
    - GeneralConfig, load_document: Document loading
    - generate: The generation pipeline
    - main(): CLI entry point
    - __version__, __description__: Package metadata
"""

import importlib.metadata as importlib_metadata

from .config import GeneralConfig, load_document
from .generator import generate
from .main import main

_metadata = importlib_metadata.metadata("wgmeshgen")
__version__ = _metadata["Version"]
__description__ = _metadata["Summary"]


__all__ = ["GeneralConfig", "load_document", "generate", "main"]
