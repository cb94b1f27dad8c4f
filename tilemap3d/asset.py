"""Tilemap asset data: blocks, configs and grid/world coordinate conversion."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

INDEX_NONE = -1

Vector = tuple[float, float, float]
Rotation = tuple[float, float, float]  # (pitch, yaw, roll)
Color = tuple[float, float, float, float]


class BlockType(enum.IntEnum):
    """What occupies a grid cell."""

    AIR = 0
    CUBE = 1
    MESH = 2
    UNKNOWN = 3


class BlockState(enum.IntEnum):
    """Height of a cube block."""

    FULL = 0
    HALF = 1
    UNKNOWN = 2


class BlockDirection(enum.IntEnum):
    """Faces of a block, in the order used by the face vertex table."""

    FORWARD = 0
    RIGHT = 1
    BACK = 2
    LEFT = 3
    UP = 4
    DOWN = 5


@dataclass
class PlayerStartLoc:
    """Where the player starts; ``transform`` of None stands for identity."""

    transform: Any = None
    index: int = INDEX_NONE
    marked_decal: Any = None


@dataclass
class PlayerPawnLoc:
    """A player pawn placed on a block."""

    index: int = INDEX_NONE
    marked_decal: Any = None


@dataclass
class MeshLoc:
    """A static mesh placed on a block."""

    id: Optional[str] = None
    rotation: Rotation = (0.0, 0.0, 0.0)
    scale: Vector = (1.0, 1.0, 1.0)
    instanced_mesh_actor: Any = None


@dataclass
class Block:
    """One grid cell of the tilemap."""

    block_id: Optional[str] = None
    block_type: BlockType = BlockType.AIR
    block_state: BlockState = BlockState.FULL
    player_pawn_loc: PlayerPawnLoc = field(default_factory=PlayerPawnLoc)
    mesh_loc: MeshLoc = field(default_factory=MeshLoc)


@dataclass
class GameBoardData:
    """Generated terrain mesh buffers."""

    vertices: list[Vector] = field(default_factory=list)
    triangles: list[int] = field(default_factory=list)
    normals: list[Vector] = field(default_factory=list)
    colors: list[tuple[int, int, int, int]] = field(default_factory=list)
    uv0: list[tuple[float, float]] = field(default_factory=list)
    vertex_count: int = 0


@dataclass
class PathFindingNode:
    """A node visited during path finding."""

    index: int = INDEX_NONE
    cost: int = INDEX_NONE
    parent: int = INDEX_NONE


@dataclass
class PathFindingEdge:
    """An edge to a neighbouring block with its cost."""

    index: int = INDEX_NONE
    cost: int = INDEX_NONE


@dataclass
class PathFindingBlock:
    """A block's location and its outgoing edges."""

    location: Vector = (0.0, 0.0, 0.0)
    edge_array_index: list[int] = field(default_factory=list)
    edge_array: list[PathFindingEdge] = field(default_factory=list)


@dataclass(frozen=True)
class BlockConfig:
    """A kind of cube block and its textures (top, side, bottom)."""

    id: Optional[str] = None
    block_type: BlockType = BlockType.AIR
    cost: int = 0
    block_textures: tuple[Any, ...] = ()


@dataclass(frozen=True)
class MeshConfig:
    """A kind of placeable mesh."""

    id: Optional[str] = None
    mesh: Any = None
    material: Any = None


EMPTY_BLOCK_CONFIG = BlockConfig()
EMPTY_MESH_CONFIG = MeshConfig()


@dataclass
class TilemapConfig:
    """Shared configuration: texture array sources, materials and block kinds."""

    textures: list[Any] = field(default_factory=list)
    terrain_material: Any = None
    decal_material: Any = None
    block_configs: list[BlockConfig] = field(default_factory=list)
    mesh_configs: list[MeshConfig] = field(default_factory=list)
    need_spawn_to_game_board_pawn_data: Any = None
    player_start_decal_color: Color = (1.0, 0.0, 0.0, 1.0)
    player_pawn_decal_color: Color = (0.0, 0.0, 1.0, 1.0)
    cached_loaded_pawn_data: dict[str, Any] = field(default_factory=dict)


def _c_div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _c_mod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    return a - b * _c_div(a, b)


@dataclass
class TilemapAsset:
    """A 3D tilemap: level dimensions, blocks and derived data."""

    floors: int = 0
    level_size_x: int = 0
    level_size_y: int = 0
    level_size_z: int = 1
    grid_size: int = 100
    height_slow_increment: int = 100
    height_between_level: int = 200
    trace_for_walls_height: int = 100
    diagonal_movement: bool = False
    config: Optional[TilemapConfig] = None
    blocks: list[Block] = field(default_factory=list)
    path_finding_blocks: list[PathFindingBlock] = field(default_factory=list)
    game_board_data: GameBoardData = field(default_factory=GameBoardData)
    player_start_loc: PlayerStartLoc = field(default_factory=PlayerStartLoc)
    player_start_height: float = 100.0
    map_bound_offset: float = 50.0

    def max_level_height(self) -> int:
        return (self.floors + 1) * self.grid_size

    def min_level_height(self) -> int:
        return 0

    def grid_to_index(self, x: float, y: float, z: float) -> int:
        """Flat block index of grid cell (x, y, z)."""
        x, y, z = int(x), int(y), int(z)
        return z * self.level_size_x * self.level_size_y + y * self.level_size_x + x

    def location_to_index(self, location: Sequence[float], floor: Optional[int] = None) -> int:
        """Flat block index of a world location on a floor (derived from z if omitted)."""
        if floor is None:
            floor = self.location_to_floor(location)
        grid = self.grid_size
        pivot_x = grid * 0.5 + location[0]
        pivot_y = grid * 0.5 + location[1]
        add_x = 1 if math.floor(math.fmod(pivot_x, grid)) else 0
        add_y = 1 if math.floor(math.fmod(pivot_y, grid)) else 0
        x = math.floor((pivot_x + add_x) / grid)
        y = math.floor((pivot_y + add_y) / grid) * self.level_size_x
        return x + y + self.level_size_x * self.level_size_y * floor

    def location_to_floor(self, location: Sequence[float]) -> int:
        return math.floor(location[2] / self.grid_size)

    def index_to_location(self, index: int) -> Vector:
        """World location of the origin of the block at ``index``."""
        residue_x = _c_mod(index, self.level_size_x)
        residue_yz = _c_div(index, self.level_size_x)
        residue_z = _c_div(index, self.level_size_x * self.level_size_y)
        residue_y = residue_yz - self.level_size_x * residue_z
        grid = float(self.grid_size)
        return (grid * residue_x, grid * residue_y, grid * residue_z)

    def _require_config(self) -> TilemapConfig:
        if self.config is None:
            raise ValueError("tilemap asset has no config")
        return self.config

    def block_config(self, block_id: Optional[str]) -> BlockConfig:
        """The block config with ``block_id``, or the empty config."""
        return next(
            (c for c in self._require_config().block_configs if c.id == block_id),
            EMPTY_BLOCK_CONFIG,
        )

    def mesh_config(self, mesh_id: Optional[str]) -> MeshConfig:
        """The mesh config with ``mesh_id``, or the empty config."""
        return next(
            (c for c in self._require_config().mesh_configs if c.id == mesh_id),
            EMPTY_MESH_CONFIG,
        )

    def terrain_texture_index(self, block_id: Optional[str], flag: int) -> int:
        """Layer in the texture array for a block's texture ``flag``, or INDEX_NONE."""
        config = self._require_config()
        if flag < 0:
            raise IndexError(f"texture flag {flag} is negative")
        texture = None
        for block_config in config.block_configs:
            if block_config.id == block_id:
                textures = block_config.block_textures
                if not textures:
                    raise IndexError(f"block config {block_id!r} has no textures")
                texture = textures[-1] if len(textures) <= flag else textures[flag]
                break
        if texture is None:
            return INDEX_NONE
        return next(
            (i for i, source in enumerate(config.textures) if source == texture),
            INDEX_NONE,
        )