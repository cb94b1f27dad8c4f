import pytest

from tilemap3d.asset import (
    INDEX_NONE,
    Block,
    BlockConfig,
    BlockType,
    MeshConfig,
    MeshLoc,
    TilemapAsset,
    TilemapConfig,
)
from tilemap3d.context import BuilderContext, MapBuilderMode
from tilemap3d.scene import (
    Decal,
    EditorSettings,
    InputKeyEvent,
    MeshActor,
    Scene,
)


class RecordingMode:
    def __init__(self, mode, scene):
        self.builder_mode = mode
        self.scene = scene
        self.events = []
        self.ticks = []

    def input_key(self, event):
        self.events.append(event)

    def tick(self, delta):
        self.ticks.append(delta)


def make_asset(prefill=False):
    config = TilemapConfig(
        textures=["top", "side", "bottom"],
        terrain_material="terrain-mat",
        decal_material="decal-mat",
        block_configs=[
            BlockConfig(id="grass", block_type=BlockType.CUBE, block_textures=("top", "side", "bottom"))
        ],
        mesh_configs=[MeshConfig(id="tree", mesh="tree-mesh", material="tree-mat")],
    )
    asset = TilemapAsset(floors=2, level_size_x=2, level_size_y=2, config=config)
    if prefill:
        asset.blocks = [Block() for _ in range(8)]
    return asset


def make_scene(asset=None, factory=None):
    created = []

    def default_factory(mode, scene):
        m = RecordingMode(mode, scene)
        created.append(m)
        return m

    scene = Scene(asset or make_asset(prefill=True), BuilderContext(), EditorSettings(),
                  factory or default_factory)
    return scene, created


def test_on_construction_creates_mode_for_current_context_mode():
    scene, created = make_scene()
    scene.on_construction()
    assert [m.builder_mode for m in created] == [MapBuilderMode.VIEW]
    assert scene.edit_mode is created[0]


def test_context_mode_change_switches_edit_mode():
    scene, created = make_scene()
    scene.context.map_builder_mode.value = MapBuilderMode.BLOCK
    first = scene.edit_mode
    assert first.builder_mode == MapBuilderMode.BLOCK
    scene.context.map_builder_mode.value = MapBuilderMode.BLOCK
    assert scene.edit_mode is first
    assert len(created) == 1


def test_tick_and_input_are_forwarded():
    scene, created = make_scene()
    scene.on_build_mode_changed(MapBuilderMode.MESH)
    event = InputKeyEvent(hit_location=(0.0, 0.0, 0.0))
    assert scene.input_key(event) is True
    scene.tick(0.5)
    assert created[0].events == [event]
    assert created[0].ticks == [0.5]


def test_input_without_mode_is_not_handled():
    scene = Scene(make_asset(prefill=True))
    scene.on_build_mode_changed(MapBuilderMode.VIEW)
    assert scene.edit_mode is None
    assert scene.input_key(InputKeyEvent()) is False


def test_close_unbinds_mode_watcher():
    scene, _ = make_scene()
    assert scene.context.map_builder_mode.is_bound()
    scene.close()
    assert not scene.context.map_builder_mode.is_bound()


def test_materials_created_once_from_config():
    scene, _ = make_scene()
    terrain_mat = scene.recreate_terrain_material()
    assert terrain_mat.parent == "terrain-mat"
    assert terrain_mat.parameters["MainTextures"] == scene.asset.config.textures
    assert scene.recreate_terrain_material() is terrain_mat
    start = scene.recreate_player_start_material()
    assert start.parent == "decal-mat"
    assert start.parameters["BaseColor"] == scene.asset.config.player_start_decal_color
    pawn = scene.recreate_player_pawn_material()
    assert pawn.parameters["BaseColor"] == scene.asset.config.player_pawn_decal_color
    assert pawn is not start


def test_missing_config_raises():
    asset = make_asset()
    asset.config = None
    scene, _ = make_scene(asset)
    with pytest.raises(ValueError):
        scene.recreate_terrain_material()


def test_config_color_change_updates_marker_material():
    scene, _ = make_scene()
    scene.on_construction()
    material = scene.context.dynamic_player_start_marker_material
    scene.asset.config.player_start_decal_color = (0.0, 1.0, 0.0, 1.0)
    scene.on_property_changed(scene.asset.config, "player_start_decal_color")
    assert scene.context.dynamic_player_start_marker_material is material
    assert material.parameters["BaseColor"] == (0.0, 1.0, 0.0, 1.0)


def test_asset_change_rebuilds_and_unrelated_does_not():
    scene, _ = make_scene()
    scene.on_construction()
    asset = scene.asset
    asset.level_size_x = 3
    scene.on_property_changed(object(), "level_size_x")
    assert len(asset.blocks) == 8
    scene.on_property_changed(asset, "level_size_x")
    assert len(asset.blocks) == asset.level_size_x * asset.level_size_y * asset.floors


def test_rebuild_keeps_existing_blocks_and_builds_terrain():
    scene, _ = make_scene()
    scene.on_construction()
    asset = scene.asset
    first = asset.blocks[0]
    first.block_type = BlockType.CUBE
    first.block_id = "grass"
    scene.rebuild()
    assert asset.blocks[0] is first
    data = scene.terrain_data
    assert data is asset.game_board_data
    assert data.vertex_count > 0
    assert data.vertex_count == len(data.vertices) == len(data.normals)
    assert scene.terrain_material is scene.context.dynamic_terrain_material


def test_rebuild_fills_new_cells_with_zeroed_blocks():
    scene, _ = make_scene(make_asset(prefill=False))
    scene.on_construction()
    marked = [i for i, b in enumerate(scene.asset.blocks) if b.player_pawn_loc.marked_decal is not None]
    assert marked == [0]
    assert all(b.block_type == BlockType.AIR for b in scene.asset.blocks)


def test_rebuild_spawns_player_start_decal():
    scene, _ = make_scene()
    scene.on_construction()
    scene.asset.player_start_loc.index = 5
    scene.rebuild()
    decal = scene.asset.player_start_loc.marked_decal
    assert isinstance(decal, Decal)
    assert decal.location == (100.0, 0.0, 201.0)
    assert decal.material is scene.context.dynamic_player_start_marker_material
    assert decal in scene.decals


def test_rebuild_restores_meshes():
    scene, _ = make_scene()
    scene.on_construction()
    asset = scene.asset
    asset.blocks[3].mesh_loc = MeshLoc(id="tree", rotation=(0.0, 90.0, 0.0), scale=(2.0, 2.0, 2.0))
    scene.rebuild()
    actor = asset.blocks[3].mesh_loc.instanced_mesh_actor
    assert isinstance(actor, MeshActor)
    assert actor.mesh == "tree-mesh"
    assert actor.material == "tree-mat"
    assert actor.scale == (2.0, 2.0, 2.0)
    assert actor.rotation == (0.0, 90.0, 0.0)
    x, y, z = asset.index_to_location(3)
    assert actor.location == (x, y, z + asset.grid_size + 1.0)
    assert actor in scene.actors


def test_spawn_decal_at_location_uses_marker_shape():
    scene, _ = make_scene()
    decal = scene.spawn_decal_at_location("mat", (1.0, 2.0, 3.0))
    assert decal.size == (95.0, 45.0, 45.0)
    assert decal.rotation == (90.0, 0.0, 0.0)
    assert decal.location == (1.0, 2.0, 3.0)
    assert scene.decals == [decal]


def test_mesh_actor_destroy_removes_from_scene():
    scene, _ = make_scene()
    actor = scene.spawn_mesh_at_index(scene.asset.mesh_config("tree"), 2)
    assert scene.actors == [actor]
    actor.destroy()
    assert scene.actors == []
    assert actor.destroyed


def test_cleanup_player_start():
    scene, _ = make_scene()
    scene.on_construction()
    scene.asset.player_start_loc.index = 5
    scene.rebuild()
    decal = scene.asset.player_start_loc.marked_decal
    scene.cleanup_player_start()
    assert decal not in scene.decals
    assert decal.destroyed
    assert scene.asset.player_start_loc.marked_decal is None
    assert scene.asset.player_start_loc.index == INDEX_NONE


def test_cleanup_player_pawn():
    scene, _ = make_scene()
    scene.on_construction()
    block = scene.asset.blocks[6]
    block.player_pawn_loc.index = 6
    block.player_pawn_loc.marked_decal = scene.spawn_decal_at_index("mat", 6)
    decal = block.player_pawn_loc.marked_decal
    scene.cleanup_player_pawn(6)
    assert decal not in scene.decals
    assert block.player_pawn_loc.marked_decal is None
    assert block.player_pawn_loc.index == INDEX_NONE


def test_edit_range_is_centred_on_floor_cells():
    scene, _ = make_scene()
    asset = scene.asset
    asset.level_size_x = 4
    location, scale_x, scale_y = scene.edit_range()
    first = asset.index_to_location(0)
    last = asset.index_to_location(asset.level_size_x * asset.level_size_y - 1)
    assert location[0] == (first[0] + last[0]) / 2
    assert location[1] == (first[1] + last[1]) / 2
    assert scale_x / scale_y == asset.level_size_x / asset.level_size_y


def test_rebuild_places_collision_plane_from_settings():
    asset = make_asset(prefill=True)
    settings = EditorSettings(collision_plane_material="plane-mat", collision_plane_mesh="plane-mesh")
    scene = Scene(asset, BuilderContext(), settings)
    scene.on_construction()
    location, scale_x, scale_y = scene.edit_range()
    plane = scene.collision_plane
    assert plane.mesh == "plane-mesh"
    assert plane.material == "plane-mat"
    assert plane.location == location
    assert plane.scale == (scale_x, scale_y, 1.0)
    assert plane.visible