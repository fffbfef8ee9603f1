import logging
from typing import Dict, List, Tuple

import bpy
from mathutils import Vector

from ..core.errors import ConfigurationError
from ..core.tile import EdgeType, TileCatalog, TileDefinition

logger = logging.getLogger(__name__)

# custom property holding the edge type of each side
EDGE_PROPS = (
    ("NORTH", "WFC_N"),
    ("EAST",  "WFC_E"),
    ("SOUTH", "WFC_S"),
    ("WEST",  "WFC_W"),
)

DEFAULT_EDGE = EdgeType.A.name


def edges_from_object(obj: bpy.types.Object) -> Dict[str, EdgeType]:
    '''
    Reads the WFC_N/E/S/W properties of an object (falling back to its mesh data).
    A missing property means the default edge type.
    '''
    edges = {}
    chain = (obj, getattr(obj, "data", None))
    for direction, prop in EDGE_PROPS:
        value = DEFAULT_EDGE
        for source in chain:
            if source and prop in source:
                value = source[prop]
                break
        try:
            edges[direction] = EdgeType.parse(value)
        except ConfigurationError as e:
            raise ConfigurationError(f"{obj.name}.{prop}: {e}") from e
    return edges


# Creates and returns a catalog with one tile per mesh in the collection
def read_catalog_from_collection(coll: bpy.types.Collection) -> TileCatalog:
    tiles: List[TileDefinition] = []

    # sorted by name so tile indices don't depend on outliner order
    meshes = sorted((o for o in coll.all_objects if o.type == 'MESH'), key=lambda o: o.name)
    for obj in meshes:
        # the payload is the object name; the core hands it back untouched
        tiles.append(TileDefinition(len(tiles), edges_from_object(obj), obj.name, obj.name))

    if not tiles:
        raise ConfigurationError("Selected collection has no mesh objects.")
    logger.info("Read %d tile types from collection '%s'", len(tiles), coll.name)
    return TileCatalog(tiles)


def cell_location(pos: Tuple[int, int], cell_size: float) -> Vector:
    # grid row 0 is the northern edge, Blender's north is +Y
    x, y = pos
    return Vector((x * cell_size, -y * cell_size, 0.0))


def instantiate_tile(out_coll: bpy.types.Collection, src_obj: bpy.types.Object, pos: Tuple[int, int], cell_size: float) -> bpy.types.Object:
    inst = src_obj.copy()
    inst.data = src_obj.data  # share mesh
    inst.location = cell_location(pos, cell_size)
    inst.rotation_euler = src_obj.rotation_euler.copy()
    out_coll.objects.link(inst)
    return inst


def get_output_collection(scene: bpy.types.Scene, name: str) -> bpy.types.Collection:
    out_coll = bpy.data.collections.get(name)
    if out_coll is None:
        out_coll = bpy.data.collections.new(name)
        scene.collection.children.link(out_coll)
    return out_coll


def clear_collection(out_coll: bpy.types.Collection) -> None:
    for obj in list(out_coll.objects):
        out_coll.objects.unlink(obj)
        bpy.data.objects.remove(obj, do_unlink=True)
