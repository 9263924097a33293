from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from deploytree.config import DEFAULT_MAX_DEPTH, Settings
from deploytree.core.errors import APIError
from deploytree.engine_client import EngineClient, EngineError
from deploytree.file_tree import Collision, Directory, Leaf, build_tree, record_path, split_path
from deploytree.models import CollisionInfo, DeploymentFile, TreeStats
from deploytree.render import tree_stats

logger = logging.getLogger("deploytree")


@dataclass
class DeploymentTree:
    root: Directory
    stats: TreeStats
    skipped: list[str] = field(default_factory=list)
    collisions: list[CollisionInfo] = field(default_factory=list)


def _path_of(record: Any) -> str:
    path = record_path(record)
    return path if isinstance(path, str) else ""


def build_deployment_tree(
    files: Iterable[DeploymentFile] | None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> DeploymentTree:
    records = list(files or [])
    kept: list[Any] = []
    skipped: list[str] = []
    collisions: list[CollisionInfo] = []

    for record in records:
        path = _path_of(record)
        depth = len(split_path(path))
        if not depth:
            logger.warning("skipping file with unrepresentable path: %r", path)
        elif depth > max_depth:
            logger.warning("skipping file nested %d levels deep (limit %d): %.200r", depth, max_depth, path)
        else:
            kept.append(record)
            continue
        skipped.append(path)

    def _on_collision(collision: Collision) -> None:
        kind = "file" if isinstance(collision.discarded, Leaf) else "directory"
        replaced_by = _path_of(collision.record)
        collisions.append(CollisionInfo(path=collision.path, discarded=kind, replaced_by=replaced_by))
        logger.warning("path collision at %s: %s discarded by %r", collision.path, kind, replaced_by)

    root = build_tree(kept, on_collision=_on_collision)
    stats = TreeStats(
        record_count=len(records),
        skipped_count=len(skipped),
        collision_count=len(collisions),
        **tree_stats(root),
    )
    return DeploymentTree(root=root, stats=stats, skipped=skipped, collisions=collisions)


async def load_deployment_tree(
    site_id: str,
    deployment_id: str,
    client: EngineClient | None = None,
) -> DeploymentTree:
    try:
        engine = client or EngineClient.from_env()
        files = await engine.list_deployment_files(site_id, deployment_id)
    except EngineError as e:
        code = "not_found" if e.status == 404 else "upstream_error"
        raise APIError(e.status, code, e.message)
    logger.info("fetched %d files for %s/%s", len(files), site_id, deployment_id)
    return build_deployment_tree(files, max_depth=Settings.from_env().max_depth)
