"""Staging — mirror the installed layout with symlinks for IDE type-checking.

Creates, for every source file of every component::

    _staging/agents/weather-agent.ts -> ../../components/agents/weather-agent/weather-agent.ts

so alias imports can be resolved through tsconfig paths pointing at the
staging directory.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from kitn_registry.config import RegistryConfig
from kitn_registry.registry.scanner import scan_components

logger = logging.getLogger(__name__)


def stage_components(config: RegistryConfig) -> int:
    """Rebuild the staging directory and return the number of links created."""
    staging = config.staging_path
    if staging.is_symlink() or staging.is_file():
        staging.unlink()
    elif staging.exists():
        shutil.rmtree(staging)

    link_count = 0
    for manifest in scan_components(config.components_path):
        if manifest.type_dir is None:
            logger.warning("Skipping %s: unknown component type '%s'", manifest.name, manifest.type)
            continue

        for file_name in manifest.files:
            if not file_name.endswith(config.source_extension):
                continue

            source_path = manifest.directory / file_name
            staging_path = staging / manifest.type_dir / file_name
            if staging_path.is_symlink() or staging_path.exists():
                logger.warning(
                    "Skipping %s/%s from %s: already staged by another component",
                    manifest.type_dir,
                    file_name,
                    manifest.name,
                )
                continue
            staging_path.parent.mkdir(parents=True, exist_ok=True)

            target = Path(os.path.relpath(source_path, staging_path.parent))
            staging_path.symlink_to(target)
            link_count += 1

    logger.info("Staged %d files in %s", link_count, staging)
    return link_count
