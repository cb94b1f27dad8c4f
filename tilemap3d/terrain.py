"""Terrain mesh generation from the block grid of a tilemap asset."""

from __future__ import annotations

from itertools import product
from typing import Optional, Sequence

from tilemap3d.asset import (
    Block,
    BlockConfig,
    BlockDirection,
    BlockState,
    BlockType,
    GameBoardData,
    TilemapAsset,
    Vector,
)

FULL_BLOCK_VERTICES: tuple[Vector, ...] = (
    (50.0, 50.0, 100.0),
    (50.0, -50.0, 100.0),
    (50.0, -50.0, 0.0),
    (50.0, 50.0, 0.0),
    (-50.0, -50.0, 100.0),
    (-50.0, 50.0, 100.0),
    (-50.0, 50.0, 0.0),
    (-50.0, -50.0, 0.0),
)

HALF_BLOCK_VERTICES: tuple[Vector, ...] = (
    (50.0, 50.0, 50.0),
    (50.0, -50.0, 50.0),
    (50.0, -50.0, 0.0),
    (50.0, 50.0, 0.0),
    (-50.0, -50.0, 50.0),
    (-50.0, 50.0, 50.0),
    (-50.0, 50.0, 0.0),
    (-50.0, -50.0, 0.0),
)

# Four vertex indices per face, in BlockDirection order.
FACE_VERTEX_ORDER: tuple[int, ...] = (
    0, 1, 2, 3,  # forward
    5, 0, 3, 6,  # right
    4, 5, 6, 7,  # back
    1, 4, 7, 2,  # left
    5, 4, 1, 0,  # up
    3, 2, 7, 6,  # down
)

_NORMALS: dict[BlockDirection, Vector] = {
    BlockDirection.FORWARD: (1.0, 0.0, 0.0),
    BlockDirection.RIGHT: (0.0, 1.0, 0.0),
    BlockDirection.BACK: (-1.0, 0.0, 0.0),
    BlockDirection.LEFT: (0.0, -1.0, 0.0),
    BlockDirection.UP: (0.0, 0.0, 1.0),
    BlockDirection.DOWN: (0.0, 0.0, -1.0),
}

_SIDES = (BlockDirection.FORWARD, BlockDirection.RIGHT, BlockDirection.BACK, BlockDirection.LEFT)
_VERTICALS = (BlockDirection.UP, BlockDirection.DOWN)

_FACE_UVS = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))
_BLOCK_SCALE = 100


def _add(a: Sequence[float], b: Sequence[float]) -> Vector:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def block_normal(direction: BlockDirection) -> Vector:
    """Outward unit normal of the face in ``direction``."""
    return _NORMALS[BlockDirection(direction)]


def neighbour(direction: BlockDirection, location: Sequence[float]) -> Vector:
    """Grid location one step from ``location`` in ``direction``."""
    return _add(location, block_normal(direction))


def face_vertices(state: BlockState, direction: BlockDirection, location: Sequence[float]) -> list[Vector]:
    """The four corner vertices of a block face, offset by ``location``."""
    table = HALF_BLOCK_VERTICES if state == BlockState.HALF else FULL_BLOCK_VERTICES
    start = int(BlockDirection(direction)) * 4
    return [_add(table[i], location) for i in FACE_VERTEX_ORDER[start:start + 4]]


def block_texture_index(asset: TilemapAsset, block_id: Optional[str], normal: Sequence[float]) -> int:
    """Texture-array layer for a face: top for up, bottom for down, side otherwise."""
    normal = tuple(normal)
    if normal == _NORMALS[BlockDirection.UP]:
        return asset.terrain_texture_index(block_id, 0)
    if normal == _NORMALS[BlockDirection.DOWN]:
        return asset.terrain_texture_index(block_id, 2)
    return asset.terrain_texture_index(block_id, 1)


def _in_bounds(asset: TilemapAsset, location: Sequence[float]) -> bool:
    x, y, z = location
    return 0 <= x < asset.level_size_x and 0 <= y < asset.level_size_y and 0 <= z < asset.floors


def _block_at(asset: TilemapAsset, location: Sequence[float]) -> Block:
    return asset.blocks[asset.grid_to_index(*location)]


def _is_open(asset: TilemapAsset, location: Sequence[float]) -> bool:
    """True when a face toward ``location`` is visible: outside the map or air."""
    if not _in_bounds(asset, location):
        return True
    return _block_at(asset, location).block_type == BlockType.AIR


def _is_open_to_full(asset: TilemapAsset, location: Sequence[float]) -> bool:
    """Like ``_is_open``, but a half cube also leaves a full block's side visible."""
    if not _in_bounds(asset, location):
        return True
    block = _block_at(asset, location)
    if block.block_type == BlockType.AIR:
        return True
    return block.block_type == BlockType.CUBE and block.block_state == BlockState.HALF


def _create_face(asset: TilemapAsset, direction: BlockDirection, location: Vector, block: Block) -> None:
    data = asset.game_board_data
    normal = block_normal(direction)
    color = (0, 0, 0, block_texture_index(asset, block.block_id, normal) & 0xFF)
    count = data.vertex_count
    data.vertices.extend(face_vertices(block.block_state, direction, location))
    data.triangles.extend((count + 3, count + 2, count, count + 2, count + 1, count))
    data.normals.extend([normal] * 4)
    data.colors.extend([color] * 4)
    data.uv0.extend(_FACE_UVS)
    data.vertex_count += 4


def generate_mesh(asset: TilemapAsset) -> GameBoardData:
    """Append the visible faces of every non-air block to the asset's board data."""
    for x, y, z in product(range(asset.level_size_x), range(asset.level_size_y), range(asset.floors)):
        block = asset.blocks[asset.grid_to_index(x, y, z)]
        if block.block_type == BlockType.AIR:
            continue
        location = (float(x), float(y), float(z))
        world = (x * float(_BLOCK_SCALE), y * float(_BLOCK_SCALE), z * float(_BLOCK_SCALE))
        for direction in _SIDES:
            target = neighbour(direction, location)
            if block.block_state == BlockState.FULL:
                visible = _is_open_to_full(asset, target)
            elif block.block_state == BlockState.HALF:
                visible = _is_open(asset, target)
            else:
                visible = False
            if visible:
                _create_face(asset, direction, world, block)
        for direction in _VERTICALS:
            if _is_open(asset, neighbour(direction, location)):
                _create_face(asset, direction, world, block)
    return asset.game_board_data


def setup(asset: TilemapAsset) -> GameBoardData:
    """Rebuild the terrain mesh data from scratch."""
    asset.game_board_data = GameBoardData()
    return generate_mesh(asset)


def modify_terrain(asset: TilemapAsset, index: int, config: BlockConfig, half_block: bool) -> bool:
    """Set the block at ``index`` from ``config`` and rebuild; False if out of range."""
    if not 0 <= index < len(asset.blocks):
        return False
    block = asset.blocks[index]
    block.block_type = config.block_type
    block.block_id = config.id
    block.block_state = BlockState.HALF if half_block else BlockState.FULL
    setup(asset)
    return True