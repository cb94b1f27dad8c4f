"""Editor preview scene: terrain, collision plane, decals and placed meshes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from tilemap3d import terrain
from tilemap3d.asset import (
    INDEX_NONE,
    Block,
    BlockConfig,
    GameBoardData,
    MeshConfig,
    MeshLoc,
    PlayerPawnLoc,
    Rotation,
    TilemapAsset,
    TilemapConfig,
    Vector,
)
from tilemap3d.context import BuilderContext, MapBuilderMode

LEFT_MOUSE_BUTTON = "LeftMouseButton"
IE_PRESSED = "pressed"
IE_RELEASED = "released"

DECAL_SIZE: Vector = (95.0, 45.0, 45.0)
DECAL_ROTATION: Rotation = (90.0, 0.0, 0.0)
MARKER_HEIGHT_OFFSET = 1.0

ModeFactory = Callable[[MapBuilderMode, "Scene"], Any]


@dataclass
class EditorSettings:
    """Project-wide editor settings for the collision plane."""

    collision_plane_material: Any = None
    collision_plane_mesh: Any = None


@dataclass(eq=False)
class Material:
    """A dynamic material instance with its parameter overrides."""

    parent: Any = None
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class Decal:
    """A marker decal projected onto the terrain."""

    material: Any
    location: Vector
    rotation: Rotation = DECAL_ROTATION
    size: Vector = DECAL_SIZE
    absolute_scale: bool = True
    destroyed: bool = False
    _owner: Optional[list] = field(default=None, repr=False)

    def destroy(self) -> None:
        """Remove the decal from the scene it was spawned in."""
        if self._owner is not None and self in self._owner:
            self._owner.remove(self)
        self._owner = None
        self.destroyed = True


@dataclass(eq=False)
class MeshActor:
    """A static mesh placed in the scene."""

    mesh: Any
    material: Any
    location: Vector
    scale: Vector = (1.0, 1.0, 1.0)
    rotation: Rotation = (0.0, 0.0, 0.0)
    destroyed: bool = False
    _owner: Optional[list] = field(default=None, repr=False)

    def destroy(self) -> None:
        """Remove the actor from the scene it was spawned in."""
        if self._owner is not None and self in self._owner:
            self._owner.remove(self)
        self._owner = None
        self.destroyed = True


@dataclass
class InputKeyEvent:
    """A key event together with the result of the mouse line traces.

    ``hit_location`` is None when the trace hit nothing blocking;
    ``hit_actor`` is the mesh actor hit by the mesh trace, if any.
    """

    key: str = LEFT_MOUSE_BUTTON
    event: str = IE_PRESSED
    hit_location: Optional[Vector] = None
    hit_actor: Any = None

    @property
    def is_blocking_hit(self) -> bool:
        return self.hit_location is not None


@dataclass
class CollisionPlane:
    """The clickable plane spanning the editable area."""

    mesh: Any = None
    material: Any = None
    location: Vector = (0.0, 0.0, 0.0)
    scale: Vector = (1.0, 1.0, 1.0)
    visible: bool = False


def _truncating_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _zeroed_block() -> Block:
    # Newly grown cells are zero-filled, so their pawn index is 0, not INDEX_NONE.
    return Block(
        player_pawn_loc=PlayerPawnLoc(index=0),
        mesh_loc=MeshLoc(scale=(0.0, 0.0, 0.0)),
    )


class Scene:
    """The preview scene of one tilemap asset and the active edit mode."""

    def __init__(
        self,
        asset: TilemapAsset,
        context: Optional[BuilderContext] = None,
        settings: Optional[EditorSettings] = None,
        mode_factory: Optional[ModeFactory] = None,
    ):
        self.asset = asset
        self.context = context if context is not None else BuilderContext()
        self.settings = settings if settings is not None else EditorSettings()
        self.mode_factory: ModeFactory = mode_factory or (lambda mode, scene: None)
        self.edit_mode: Any = None
        self.collision_plane = CollisionPlane()
        self.terrain_material: Any = None
        self.terrain_data: GameBoardData = asset.game_board_data
        self.decals: list[Decal] = []
        self.actors: list[MeshActor] = []
        self.context.map_builder_mode.bind(self.on_build_mode_changed)

    def close(self) -> None:
        """Stop listening to mode changes."""
        self.context.map_builder_mode.unbind(self)

    def __enter__(self) -> "Scene":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _config(self) -> TilemapConfig:
        if self.asset.config is None:
            raise ValueError("tilemap asset has no config")
        return self.asset.config

    def on_construction(self) -> None:
        """Create the edit mode and materials, then build the scene."""
        self.on_build_mode_changed(self.context.map_builder_mode.value)
        self.recreate_terrain_material()
        self.recreate_player_start_material()
        self.recreate_player_pawn_material()
        self.rebuild()

    def tick(self, delta_seconds: float) -> None:
        if self.edit_mode is not None:
            self.edit_mode.tick(delta_seconds)

    def input_key(self, event: InputKeyEvent) -> bool:
        """Forward a key event to the edit mode; True if one received it."""
        if self.edit_mode is None:
            return False
        self.edit_mode.input_key(event)
        return True

    def on_property_changed(self, obj: Any, property_name: str) -> None:
        """React to an edited property of the settings, the asset or its config."""
        if obj is self.settings:
            self.rebuild()
        if obj is self.asset:
            self.rebuild()
        if isinstance(obj, TilemapConfig):
            if property_name == "textures":
                self.recreate_terrain_material()
            if property_name == "player_start_decal_color":
                self.recreate_player_start_material()
            if property_name == "player_pawn_decal_color":
                self.recreate_player_pawn_material()

    def on_build_mode_changed(self, mode: MapBuilderMode) -> None:
        """Switch to the edit mode for ``mode`` unless it is already active."""
        if self.edit_mode is not None and getattr(self.edit_mode, "builder_mode", None) == mode:
            return
        self.edit_mode = self.mode_factory(mode, self)

    def recreate_terrain_material(self) -> Material:
        config = self._config()
        if self.context.dynamic_terrain_material is None:
            self.context.dynamic_terrain_material = Material(parent=config.terrain_material)
        material = self.context.dynamic_terrain_material
        material.parameters["MainTextures"] = config.textures
        return material

    def recreate_player_start_material(self) -> Material:
        config = self._config()
        if self.context.dynamic_player_start_marker_material is None:
            self.context.dynamic_player_start_marker_material = Material(parent=config.decal_material)
        material = self.context.dynamic_player_start_marker_material
        material.parameters["BaseColor"] = config.player_start_decal_color
        return material

    def recreate_player_pawn_material(self) -> Material:
        config = self._config()
        if self.context.dynamic_player_pawn_marker_material is None:
            self.context.dynamic_player_pawn_marker_material = Material(parent=config.decal_material)
        material = self.context.dynamic_player_pawn_marker_material
        material.parameters["BaseColor"] = config.player_pawn_decal_color
        return material

    def edit_range(self) -> tuple[Vector, float, float]:
        """Centre of the editable area and the plane's x and y scale."""
        asset = self.asset
        grid = asset.grid_size
        scale_x = asset.level_size_x * (grid / 200.0)
        scale_y = asset.level_size_y * (grid / 200.0)
        x = (asset.level_size_x * grid) / 2.0 - grid / 2.0
        y = (asset.level_size_y * grid) / 2.0 - grid / 2.0
        return (x, y, 0.0), scale_x, scale_y

    def _resize_blocks(self) -> None:
        asset = self.asset
        size = asset.level_size_x * asset.level_size_y * asset.floors
        if len(asset.blocks) > size:
            del asset.blocks[size:]
        else:
            asset.blocks.extend(_zeroed_block() for _ in range(size - len(asset.blocks)))

    def _apply_terrain(self) -> None:
        self.terrain_material = self.context.dynamic_terrain_material
        self.terrain_data = self.asset.game_board_data

    def rebuild(self) -> None:
        """Lay out the collision plane, regenerate terrain and restore markers and meshes."""
        plane = self.collision_plane
        if self.settings.collision_plane_mesh is not None:
            plane.mesh = self.settings.collision_plane_mesh
        if self.settings.collision_plane_material is not None:
            plane.material = self.settings.collision_plane_material
        location, scale_x, scale_y = self.edit_range()
        plane.location = location
        plane.scale = (scale_x, scale_y, 1.0)
        plane.visible = True

        self._resize_blocks()
        terrain.setup(self.asset)
        self._apply_terrain()

        asset = self.asset
        asset.player_start_loc.marked_decal = self.spawn_decal_at_index(
            self.context.dynamic_player_start_marker_material, asset.player_start_loc.index
        )
        for index, block in enumerate(asset.blocks):
            if block.player_pawn_loc.index == index:
                block.player_pawn_loc.marked_decal = self.spawn_decal_at_index(
                    self.context.dynamic_player_pawn_marker_material, index
                )
            if block.mesh_loc.id is not None:
                actor = self.spawn_mesh_at_index(asset.mesh_config(block.mesh_loc.id), index)
                actor.scale = block.mesh_loc.scale
                actor.rotation = block.mesh_loc.rotation
                block.mesh_loc.instanced_mesh_actor = actor

    def _marker_location(self, index: int) -> Vector:
        asset = self.asset
        x, y, _ = asset.index_to_location(index)
        floor = _truncating_div(index, asset.level_size_x * asset.level_size_y)
        z = floor * asset.grid_size + asset.grid_size + MARKER_HEIGHT_OFFSET
        return (x, y, float(z))

    def spawn_decal_at_location(self, material: Any, location: Sequence[float]) -> Decal:
        decal = Decal(material=material, location=tuple(location), _owner=self.decals)
        self.decals.append(decal)
        return decal

    def spawn_decal_at_index(self, material: Any, index: int) -> Decal:
        """Spawn a decal on top of the block at ``index``."""
        return self.spawn_decal_at_location(material, self._marker_location(index))

    def spawn_mesh_at_location(self, config: MeshConfig, location: Sequence[float]) -> MeshActor:
        actor = MeshActor(
            mesh=config.mesh,
            material=config.material,
            location=tuple(location),
            _owner=self.actors,
        )
        self.actors.append(actor)
        return actor

    def spawn_mesh_at_index(self, config: MeshConfig, index: int) -> MeshActor:
        """Spawn a mesh on top of the block at ``index``."""
        return self.spawn_mesh_at_location(config, self._marker_location(index))

    def cleanup_player_start(self) -> None:
        """Remove the player start marker and clear its index."""
        loc = self.asset.player_start_loc
        if loc.marked_decal is not None:
            loc.marked_decal.destroy()
            loc.marked_decal = None
        loc.index = INDEX_NONE

    def cleanup_player_pawn(self, index: int) -> None:
        """Remove the player pawn marker of the block at ``index``."""
        loc = self.asset.blocks[index].player_pawn_loc
        if loc.marked_decal is not None:
            loc.marked_decal.destroy()
            loc.marked_decal = None
        loc.index = INDEX_NONE


__all__ = [
    "BlockConfig",
    "CollisionPlane",
    "Decal",
    "EditorSettings",
    "InputKeyEvent",
    "Material",
    "MeshActor",
    "Scene",
]