"""Edit modes that turn viewport clicks into undoable editing commands."""

from __future__ import annotations

import abc
from typing import Optional, Sequence

from tilemap3d.asset import INDEX_NONE, Block, BlockType, TilemapAsset, Vector
from tilemap3d.commands import (
    AddCubeCommand,
    CleanupPlayerPawnCommand,
    CleanupPlayerStartCommand,
    FillCommand,
    RemoveCubeCommand,
    RemoveMeshCommand,
    RemovePlayerPawnCommand,
    SpawnMeshCommand,
    SpawnPlayerPawnCommand,
    SpawnPlayerStartCommand,
)
from tilemap3d.context import BlockSubMode, MapBuilderMode, MeshSubMode, PlayerPawnMode
from tilemap3d.scene import IE_PRESSED, LEFT_MOUSE_BUTTON, InputKeyEvent, Scene


def _is_valid_index(asset: TilemapAsset, index: int) -> bool:
    return 0 <= index < len(asset.blocks)


def _block(asset: TilemapAsset, index: int) -> Block:
    if not _is_valid_index(asset, index):
        raise IndexError(f"block index {index} out of range 0..{len(asset.blocks) - 1}")
    return asset.blocks[index]


def _surface_location(asset: TilemapAsset, location: Sequence[float]) -> Vector:
    """Move a hit on a block's top surface down into the block it belongs to."""
    return (location[0], location[1], location[2] - asset.grid_size * 0.5)


def _is_left_press(event: InputKeyEvent) -> bool:
    return event.key == LEFT_MOUSE_BUTTON and event.event == IE_PRESSED


class EditMode(abc.ABC):
    """Handles input for one map builder mode of a scene."""

    def __init__(self, builder_mode: MapBuilderMode, scene: Scene):
        self.builder_mode = builder_mode
        self.scene = scene

    @property
    def asset(self) -> TilemapAsset:
        return self.scene.asset

    @abc.abstractmethod
    def input_key(self, event: InputKeyEvent) -> None:
        """React to a key event in the viewport."""

    def tick(self, delta_seconds: float) -> None:
        """Advance per-frame state; edit modes keep none."""


class BlockEditMode(EditMode):
    """Adds, fills or removes cube blocks under the cursor."""

    def input_key(self, event: InputKeyEvent) -> None:
        if not _is_left_press(event) or not event.is_blocking_hit:
            return
        scene = self.scene
        asset = self.asset
        context = scene.context
        invoker = context.invoker
        location = event.hit_location
        floor = asset.location_to_floor(location)
        index = asset.location_to_index(location, floor)

        # Markers resting on the affected block have to go before it changes.
        above_index = asset.location_to_index(location, max(0, floor - 1))
        if _block(asset, above_index).player_pawn_loc.marked_decal is not None:
            invoker.execute(CleanupPlayerPawnCommand(scene, above_index))
        if asset.player_start_loc.index == index:
            invoker.execute(CleanupPlayerStartCommand(scene))

        if context.block_sub_mode.value == BlockSubMode.ADD:
            if context.fill_paint.value:
                invoker.execute(FillCommand(scene, floor))
            else:
                invoker.execute(AddCubeCommand(scene, index, floor))
        elif _block(asset, index).block_type != BlockType.AIR:
            invoker.execute(RemoveCubeCommand(scene, index, floor))


class MeshEditMode(EditMode):
    """Spawns, removes or selects placed meshes."""

    def _target_index(self, event: InputKeyEvent) -> Optional[int]:
        if not event.is_blocking_hit:
            return None
        index = self.asset.location_to_index(_surface_location(self.asset, event.hit_location))
        if not _is_valid_index(self.asset, index):
            return None
        if event.key != LEFT_MOUSE_BUTTON:
            return None
        return index

    def input_key(self, event: InputKeyEvent) -> None:
        if event.event != IE_PRESSED:
            return
        scene = self.scene
        asset = self.asset
        context = scene.context

        if context.mesh_sub_mode.value == MeshSubMode.SPAWN:
            index = self._target_index(event)
            if index is None or asset.blocks[index].mesh_loc.instanced_mesh_actor is not None:
                return
            config = asset.mesh_config(context.selected_mesh_block_id.value)
            context.invoker.execute(SpawnMeshCommand(scene, config, index))

        if context.mesh_sub_mode.value == MeshSubMode.REMOVE:
            index = self._target_index(event)
            if index is None or asset.blocks[index].mesh_loc.instanced_mesh_actor is None:
                return
            context.invoker.execute(RemoveMeshCommand(scene, index))

        if context.mesh_sub_mode.value == MeshSubMode.SELECT:
            if event.hit_actor is None:
                return
            context.selected_mesh_block_index.value = next(
                (
                    i
                    for i, block in enumerate(asset.blocks)
                    if block.mesh_loc.instanced_mesh_actor is event.hit_actor
                ),
                INDEX_NONE,
            )


class PlayerPawnEditMode(EditMode):
    """Places or removes player pawn markers."""

    def input_key(self, event: InputKeyEvent) -> None:
        if not _is_left_press(event) or not event.is_blocking_hit:
            return
        asset = self.asset
        index = asset.location_to_index(_surface_location(asset, event.hit_location))
        if not _is_valid_index(asset, index):
            return
        context = self.scene.context
        if context.player_pawn_mode.value == PlayerPawnMode.SPAWN:
            context.invoker.execute(SpawnPlayerPawnCommand(self.scene, index))
        elif context.player_pawn_mode.value == PlayerPawnMode.REMOVE:
            context.invoker.execute(RemovePlayerPawnCommand(self.scene, index))


class PlayerStartEditMode(EditMode):
    """Moves the player start marker."""

    def input_key(self, event: InputKeyEvent) -> None:
        if not _is_left_press(event) or not event.is_blocking_hit:
            return
        asset = self.asset
        index = asset.location_to_index(_surface_location(asset, event.hit_location))
        if not _is_valid_index(asset, index):
            return
        self.scene.context.invoker.execute(SpawnPlayerStartCommand(self.scene, index))


_MODES = {
    MapBuilderMode.BLOCK: BlockEditMode,
    MapBuilderMode.PLAYER_START: PlayerStartEditMode,
    MapBuilderMode.PLAYER_PAWN: PlayerPawnEditMode,
    MapBuilderMode.MESH: MeshEditMode,
}


def create_edit_mode(builder_mode: MapBuilderMode, scene: Scene) -> Optional[EditMode]:
    """The edit mode for ``builder_mode``, or None if that mode takes no input."""
    mode_class = _MODES.get(builder_mode)
    if mode_class is None:
        return None
    return mode_class(builder_mode, scene)