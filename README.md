# tilemap3d

A library for 3D tile maps built from grid blocks stacked in floors. It holds
the block grid, builds a terrain mesh from it, and lets an editor change the
map through commands that can be undone.

## Modules

- `tilemap3d.asset`: the map model. `TilemapAsset` holds the block grid
  (`blocks`), the level size, the grid size, the floor count and a
  `TilemapConfig`. It converts between block indices, grid cells and world
  locations (`grid_to_index`, `location_to_index`, `location_to_floor`,
  `index_to_location`). It looks up `BlockConfig` and `MeshConfig` entries by
  id (`block_config`, `mesh_config`), and it finds the texture-array layer of a
  block face (`terrain_texture_index`). An id that is not found gives the empty
  config.
- `tilemap3d.terrain`: builds the terrain mesh into `asset.game_board_data`.
  `setup(asset)` rebuilds the mesh from scratch.
  `modify_terrain(asset, index, config, half_block)` sets one block and then
  rebuilds the mesh. Only faces that are exposed get geometry. Half blocks are
  half the height of full blocks. Each face adds four vertices, two triangles,
  normals, UVs and a colour whose alpha holds the texture layer.
- `tilemap3d.invoker`: the abstract `Command` class and the `Invoker`. The
  invoker runs commands and keeps an undo stack of at most 100 entries. When
  the stack is full, it drops the oldest entry and logs a warning.
  `undo_last()` undoes the newest command.
- `tilemap3d.commands`: undoable edits that act on a `Scene`. These are
  `AddCubeCommand`, `RemoveCubeCommand`, `FillCommand`,
  `SpawnPlayerStartCommand`, `CleanupPlayerStartCommand`,
  `SpawnPlayerPawnCommand`, `RemovePlayerPawnCommand`,
  `CleanupPlayerPawnCommand`, `SpawnMeshCommand` and `RemoveMeshCommand`.
  Two commands act on the asset directly: `ModifyMeshScale` (axis `"x"`, `"y"`
  or `"z"`) and `ModifyMeshRotation` (axis `"pitch"`, `"yaw"` or `"roll"`).
- `tilemap3d.context`: the builder mode enums and `BuilderContext`, the shared
  editor state. `BuilderContext` holds the current mode, the sub-modes, the
  selected block and mesh ids, the half-block and fill-paint flags, the dynamic
  materials and the `Invoker`.
- `tilemap3d.watcher`: `ValueWatcher`, a holder whose bound callback is called
  every time `value` is assigned.
- `tilemap3d.scene`: `Scene`, the preview scene of one asset. It lays out the
  collision plane and keeps the generated terrain data. It tracks `Decal`
  markers and `MeshActor` placements and restores them on `rebuild()`. It also
  passes `InputKeyEvent`s to the active edit mode, and switches that mode
  whenever `context.map_builder_mode` changes.
- `tilemap3d.edit_modes`: `BlockEditMode`, `MeshEditMode`,
  `PlayerPawnEditMode` and `PlayerStartEditMode`. Each one turns a left-click
  into commands on the context's invoker. `create_edit_mode(mode, scene)`
  returns the mode for a `MapBuilderMode`, or `None` for modes that take no
  input. It can be passed to `Scene` as its `mode_factory`.

## Generating terrain

```python
from tilemap3d import terrain
from tilemap3d.asset import Block, BlockConfig, BlockType, TilemapAsset, TilemapConfig

grass = BlockConfig(
    id="grass",
    block_type=BlockType.CUBE,
    block_textures=("grass_top", "grass_side", "grass_bottom"),
)
config = TilemapConfig(
    textures=["grass_top", "grass_side", "grass_bottom"],
    block_configs=[grass],
)
asset = TilemapAsset(
    floors=2,
    level_size_x=4,
    level_size_y=4,
    config=config,
    blocks=[Block() for _ in range(4 * 4 * 2)],
)

terrain.setup(asset)
index = asset.grid_to_index(1, 1, 0)
terrain.modify_terrain(asset, index, asset.block_config("grass"), half_block=False)
print(asset.game_board_data.vertex_count)  # 24: six exposed faces
```

The block list must already hold `level_size_x * level_size_y * floors`
entries. `Scene.rebuild()` resizes it to that length.

## Editing through a scene

This example uses a fresh `asset`, built as in the example above:

```python
from tilemap3d.context import MapBuilderMode
from tilemap3d.edit_modes import create_edit_mode
from tilemap3d.scene import InputKeyEvent, Scene

scene = Scene(asset, mode_factory=create_edit_mode)
scene.on_construction()
scene.context.selected_cube_block_id.value = "grass"
scene.context.map_builder_mode.value = MapBuilderMode.BLOCK

# A left-click whose trace hit the ground at world location (100, 100, 0).
scene.input_key(InputKeyEvent(hit_location=(100.0, 100.0, 0.0)))
print(asset.game_board_data.vertex_count)  # 24

scene.context.invoker.undo_last()
print(asset.game_board_data.vertex_count)  # 0
```

## What it does not do

The package holds the editor's model and logic only:

- It does not render anything and has no viewport or GUI.
- It does not trace rays from the mouse. The caller gives the hit location,
  and for mesh selection the hit actor, in `InputKeyEvent`.
- It does not load or save maps.
- It has no path-finding algorithm. `PathFindingNode`, `PathFindingEdge` and
  `PathFindingBlock` are data classes only.

## Testing

```
pip install -e ".[test]"
pytest
```