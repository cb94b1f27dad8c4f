"""Undoable editing commands for blocks, markers and placed meshes."""

from __future__ import annotations

from typing import Optional

from tilemap3d import terrain
from tilemap3d.asset import (
    EMPTY_BLOCK_CONFIG,
    EMPTY_MESH_CONFIG,
    INDEX_NONE,
    BlockConfig,
    MeshConfig,
    TilemapAsset,
)
from tilemap3d.invoker import Command
from tilemap3d.scene import Scene

SCALE_AXES = {"x": 0, "y": 1, "z": 2}
ROTATION_AXES = {"pitch": 0, "yaw": 1, "roll": 2}


def _modify_terrain(scene: Scene, index: int, config: BlockConfig) -> None:
    """Set one block from ``config`` and push the regenerated mesh to the scene."""
    if terrain.modify_terrain(scene.asset, index, config, bool(scene.context.half_block.value)):
        scene.terrain_material = scene.context.dynamic_terrain_material
        scene.terrain_data = scene.asset.game_board_data


def _valid_index(asset: TilemapAsset, index: int) -> bool:
    return 0 <= index < len(asset.blocks)


def _replace(values: tuple, position: int, value: float) -> tuple:
    items = list(values)
    items[position] = value
    return tuple(items)


class AddCubeCommand(Command):
    """Place the currently selected cube block at an index."""

    def __init__(self, scene: Scene, index: int, floor: int):
        self.scene = scene
        self.index = index
        self.floor = floor

    def execute(self) -> None:
        config = self.scene.asset.block_config(self.scene.context.selected_cube_block_id.value)
        _modify_terrain(self.scene, self.index, config)

    def undo(self) -> None:
        _modify_terrain(self.scene, self.index, EMPTY_BLOCK_CONFIG)


class RemoveCubeCommand(Command):
    """Clear the block at an index, remembering its config for undo."""

    def __init__(self, scene: Scene, index: int, floor: int):
        self.scene = scene
        self.index = index
        self.floor = floor
        block = scene.asset.blocks[index]
        self.block_config = scene.asset.block_config(block.block_id)
        self.block_state = block.block_state

    def execute(self) -> None:
        _modify_terrain(self.scene, self.index, EMPTY_BLOCK_CONFIG)

    def undo(self) -> None:
        _modify_terrain(self.scene, self.index, self.block_config)


class CleanupPlayerStartCommand(Command):
    """Remove the player start marker."""

    def __init__(self, scene: Scene):
        self.scene = scene
        self.old_index = INDEX_NONE

    def execute(self) -> None:
        self.old_index = self.scene.asset.player_start_loc.index
        self.scene.cleanup_player_start()

    def undo(self) -> None:
        decal = self.scene.spawn_decal_at_index(
            self.scene.context.dynamic_player_start_marker_material, self.old_index
        )
        loc = self.scene.asset.player_start_loc
        loc.index = self.old_index
        loc.transform = None
        loc.marked_decal = decal


def _place_pawn(scene: Scene, index: int) -> None:
    decal = scene.spawn_decal_at_index(scene.context.dynamic_player_pawn_marker_material, index)
    loc = scene.asset.blocks[index].player_pawn_loc
    loc.index = index
    loc.marked_decal = decal


class CleanupPlayerPawnCommand(Command):
    """Remove the player pawn marker at an index."""

    def __init__(self, scene: Scene, index: int):
        self.scene = scene
        self.old_index = index

    def execute(self) -> None:
        self.scene.cleanup_player_pawn(self.old_index)

    def undo(self) -> None:
        _place_pawn(self.scene, self.old_index)


class SpawnPlayerPawnCommand(Command):
    """Place a player pawn marker at an index."""

    def __init__(self, scene: Scene, index: int):
        self.scene = scene
        self.index = index

    def execute(self) -> None:
        _place_pawn(self.scene, self.index)

    def undo(self) -> None:
        self.scene.cleanup_player_pawn(self.index)


class RemovePlayerPawnCommand(Command):
    """Remove a player pawn marker; undo places it back."""

    def __init__(self, scene: Scene, index: int):
        self.scene = scene
        self.index = index

    def execute(self) -> None:
        self.scene.cleanup_player_pawn(self.index)

    def undo(self) -> None:
        _place_pawn(self.scene, self.index)


class SpawnPlayerStartCommand(Command):
    """Move the player start marker to an index."""

    def __init__(self, scene: Scene, index: int):
        self.scene = scene
        self.index = index
        self.old_index = INDEX_NONE

    def _place(self, index: int) -> None:
        decal = self.scene.spawn_decal_at_index(
            self.scene.context.dynamic_player_start_marker_material, index
        )
        loc = self.scene.asset.player_start_loc
        loc.index = index
        loc.transform = None
        loc.marked_decal = decal

    def execute(self) -> None:
        self.old_index = self.scene.asset.player_start_loc.index
        self.scene.cleanup_player_start()
        self._place(self.index)

    def undo(self) -> None:
        self.scene.cleanup_player_start()
        if not _valid_index(self.scene.asset, self.old_index):
            return
        self._place(self.old_index)


class FillCommand(Command):
    """Fill every air block of a floor with the selected cube block."""

    def __init__(self, scene: Scene, floor: int):
        self.scene = scene
        self.floor = floor
        self.modified_indices: list[int] = []

    def execute(self) -> None:
        asset = self.scene.asset
        layer = asset.level_size_x * asset.level_size_y
        self.modified_indices = []
        for index in range(layer * self.floor, layer * (self.floor + 1)):
            if asset.blocks[index].block_type == terrain.BlockType.AIR:
                config = asset.block_config(self.scene.context.selected_cube_block_id.value)
                _modify_terrain(self.scene, index, config)
                self.modified_indices.append(index)

    def undo(self) -> None:
        for index in self.modified_indices:
            _modify_terrain(self.scene, index, EMPTY_BLOCK_CONFIG)


def _place_mesh(scene: Scene, config: MeshConfig, index: int) -> None:
    mesh_loc = scene.asset.blocks[index].mesh_loc
    mesh_loc.id = config.id
    mesh_loc.scale = (1.0, 1.0, 1.0)
    mesh_loc.rotation = (0.0, 0.0, 0.0)
    mesh_loc.instanced_mesh_actor = scene.spawn_mesh_at_index(config, index)


def _clear_mesh(scene: Scene, index: int) -> None:
    mesh_loc = scene.asset.blocks[index].mesh_loc
    mesh_loc.instanced_mesh_actor.destroy()
    mesh_loc.instanced_mesh_actor = None
    mesh_loc.id = None


class SpawnMeshCommand(Command):
    """Place a mesh on the block at an index."""

    def __init__(self, scene: Scene, config: MeshConfig, index: int):
        self.scene = scene
        self.config = config
        self.index = index

    def execute(self) -> None:
        _place_mesh(self.scene, self.config, self.index)

    def undo(self) -> None:
        _clear_mesh(self.scene, self.index)


class RemoveMeshCommand(Command):
    """Remove the mesh on the block at an index, remembering its config."""

    def __init__(self, scene: Scene, index: int):
        self.scene = scene
        self.index = index
        self.config: MeshConfig = EMPTY_MESH_CONFIG

    def execute(self) -> None:
        asset = self.scene.asset
        self.config = asset.mesh_config(asset.blocks[self.index].mesh_loc.id)
        _clear_mesh(self.scene, self.index)

    def undo(self) -> None:
        _place_mesh(self.scene, self.config, self.index)


class _ModifyMeshComponent(Command):
    """Change one component of a placed mesh's transform."""

    _axes: dict[str, int] = {}

    def __init__(self, asset: TilemapAsset, index: int, axis: str, value: float):
        if axis not in self._axes:
            raise ValueError(f"unknown axis {axis!r}; expected one of {sorted(self._axes)}")
        self.asset = asset
        self.index = index
        self.axis = axis
        self.new_value = float(value)
        self.old_value = 0.0

    def _target(self):
        if not _valid_index(self.asset, self.index):
            return None
        mesh_loc = self.asset.blocks[self.index].mesh_loc
        if mesh_loc.instanced_mesh_actor is None:
            return None
        return mesh_loc

    def _read(self, mesh_loc) -> tuple:
        raise NotImplementedError

    def _write(self, mesh_loc, values: tuple) -> None:
        raise NotImplementedError

    def _set(self, mesh_loc, value: float) -> None:
        self._write(mesh_loc, _replace(self._read(mesh_loc), self._axes[self.axis], value))

    def execute(self) -> None:
        mesh_loc = self._target()
        if mesh_loc is None:
            return
        self.old_value = self._read(mesh_loc)[self._axes[self.axis]]
        self._set(mesh_loc, self.new_value)

    def undo(self) -> None:
        mesh_loc = self._target()
        if mesh_loc is None:
            return
        self._set(mesh_loc, self.old_value)


class ModifyMeshScale(_ModifyMeshComponent):
    """Set the x, y or z scale of a placed mesh."""

    _axes = SCALE_AXES

    def _read(self, mesh_loc) -> tuple:
        return mesh_loc.scale

    def _write(self, mesh_loc, values: tuple) -> None:
        mesh_loc.scale = values
        mesh_loc.instanced_mesh_actor.scale = values

    def execute(self) -> None:
        super().execute()

    def undo(self) -> None:
        super().undo()


class ModifyMeshRotation(_ModifyMeshComponent):
    """Set the pitch, yaw or roll of a placed mesh."""

    _axes = ROTATION_AXES

    def _read(self, mesh_loc) -> tuple:
        return mesh_loc.rotation

    def _write(self, mesh_loc, values: tuple) -> None:
        mesh_loc.rotation = values
        mesh_loc.instanced_mesh_actor.rotation = values

    def execute(self) -> None:
        super().execute()

    def undo(self) -> None:
        super().undo()


__all__ = [
    "AddCubeCommand",
    "CleanupPlayerPawnCommand",
    "CleanupPlayerStartCommand",
    "FillCommand",
    "ModifyMeshRotation",
    "ModifyMeshScale",
    "RemoveCubeCommand",
    "RemoveMeshCommand",
    "RemovePlayerPawnCommand",
    "SpawnMeshCommand",
    "SpawnPlayerPawnCommand",
    "SpawnPlayerStartCommand",
]


def _unused(_: Optional[object] = None) -> None:  # pragma: no cover
    return None