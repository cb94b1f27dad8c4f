"""Map builder modes and the editor state shared by widgets, modes and commands."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from tilemap3d.asset import INDEX_NONE
from tilemap3d.invoker import Invoker
from tilemap3d.watcher import ValueWatcher


class MapBuilderMode(enum.IntEnum):
    """Top-level editing mode of the map builder."""

    NONE = 0
    VIEW = 1
    BLOCK = 2
    MESH = 3
    AI_PAWN = 4
    PLAYER_PAWN = 5
    PLAYER_START = 6


class ViewSubMode(enum.IntEnum):
    VIEW = 0


class BlockSubMode(enum.IntEnum):
    ADD = 0
    REMOVE = 1


class MeshSubMode(enum.IntEnum):
    SPAWN = 0
    REMOVE = 1
    SELECT = 2


class AIPawnMode(enum.IntEnum):
    SPAWN = 0
    REMOVE = 1


class PlayerPawnMode(enum.IntEnum):
    SPAWN = 0
    REMOVE = 1


class PlayerStartMode(enum.IntEnum):
    SPAWN = 0
    REMOVE = 1


def _watch(value: Any):
    return field(default_factory=lambda: ValueWatcher(value))


@dataclass
class BuilderContext:
    """Watched editor settings, dynamic materials and the undo stack."""

    map_builder_editing: ValueWatcher[bool] = _watch(False)
    half_block: ValueWatcher[bool] = _watch(False)
    fill_paint: ValueWatcher[bool] = _watch(False)
    map_builder_mode: ValueWatcher[MapBuilderMode] = _watch(MapBuilderMode.VIEW)
    block_sub_mode: ValueWatcher[BlockSubMode] = _watch(BlockSubMode.ADD)
    mesh_sub_mode: ValueWatcher[MeshSubMode] = _watch(MeshSubMode.SPAWN)
    ai_pawn_mode: ValueWatcher[AIPawnMode] = _watch(AIPawnMode.SPAWN)
    player_pawn_mode: ValueWatcher[PlayerPawnMode] = _watch(PlayerPawnMode.SPAWN)
    player_start_mode: ValueWatcher[PlayerStartMode] = _watch(PlayerStartMode.SPAWN)
    selected_cube_block_id: ValueWatcher[Optional[str]] = _watch(None)
    selected_mesh_block_id: ValueWatcher[Optional[str]] = _watch(None)
    selected_mesh_block_index: ValueWatcher[int] = _watch(INDEX_NONE)
    dynamic_terrain_material: Any = None
    dynamic_player_start_marker_material: Any = None
    dynamic_player_pawn_marker_material: Any = None
    invoker: Invoker = field(default_factory=Invoker)