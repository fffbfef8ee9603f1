import logging
import random

import bpy

from ..core.edges import parse_compatibility_rules
from ..core.errors import ConfigurationError
from ..core.generator import GenerationStatus, generate

from .blender_utils import (
    EDGE_PROPS,
    DEFAULT_EDGE,
    clear_collection,
    get_output_collection,
    instantiate_tile,
    read_catalog_from_collection,
)

logger = logging.getLogger(__name__)

# Optional keymap for Add Props
_keymaps = []


# class to add the edge properties to the selected objects
class TILEWFC_OT_AddProps(bpy.types.Operator):
    bl_idname = "tile_wfc.add_props"
    bl_label = "Add Tile WFC Properties to Selected"
    bl_options = {"REGISTER", "UNDO"}

    def execute(self, context):
        sel = [o for o in context.selected_objects if o.type == 'MESH']
        if not sel:
            self.report({'WARNING'}, "Select at least one mesh object.")
            return {'CANCELLED'}
        for obj in sel:
            for _, key in EDGE_PROPS:
                if key not in obj:
                    obj[key] = DEFAULT_EDGE
        self.report({'INFO'}, f"Added edge props to {len(sel)} object(s).")
        return {'FINISHED'}


class TILEWFC_OT_Generate(bpy.types.Operator):
    bl_idname = "tile_wfc.generate"
    bl_label = "Generate Tiles"
    bl_options = {'REGISTER', 'UNDO'}

    def execute(self, context):
        cfg = context.scene.tile_wfc

        collection = cfg.source_collection
        if collection is None:
            self.report({'ERROR'}, "Pick a source Collection containing your modular tiles.")
            return {'CANCELLED'}

        try:
            catalog = read_catalog_from_collection(collection)
            table = parse_compatibility_rules(cfg.compatibility_rules)
        except ConfigurationError as e:
            self.report({'ERROR'}, f"Tile reading failed: {e}")
            return {'CANCELLED'}

        rng = random.Random(cfg.random_seed if cfg.use_seed else None)
        result = generate(catalog, table, cfg.width, cfg.height, rng)

        if result.status is GenerationStatus.VALIDATION_FAILED:
            for message in result.validation.messages():
                self.report({'WARNING'}, message)
            self.report({'ERROR'}, "Invalid edge compatibility rules, nothing generated.")
            return {'CANCELLED'}

        out_coll = get_output_collection(context.scene, cfg.output_collection_name or "WFC_Tiles")
        if cfg.clear_output:
            clear_collection(out_coll)

        # place a copy of the source mesh at every collapsed cell
        placed = 0
        for x, y, tile_idx in result.placements():
            src_obj = bpy.data.objects.get(catalog[tile_idx].payload)
            if src_obj is None:
                logger.warning("Source object '%s' disappeared, skipping (%d, %d)", catalog[tile_idx].payload, x, y)
                continue
            instantiate_tile(out_coll, src_obj, (x, y), cfg.cell_size)
            placed += 1

        context.view_layer.update()

        if result.status is GenerationStatus.INCOMPLETE:
            self.report({'WARNING'}, f"Generation incomplete ({result.reason.value}): placed {placed} of "
                                     f"{cfg.width * cfg.height} tiles, {len(result.contradicted_cells())} contradicted.")
        else:
            self.report({'INFO'}, f"Generated {placed} tiles in '{out_coll.name}'.")
        return {'FINISHED'}


classes = (TILEWFC_OT_Generate, TILEWFC_OT_AddProps)


def register_keymaps():
    wm = bpy.context.window_manager
    if wm is None or wm.keyconfigs.addon is None:
        return
    km = wm.keyconfigs.addon.keymaps.new(name='3D View', space_type='VIEW_3D')
    kmi = km.keymap_items.new(TILEWFC_OT_AddProps.bl_idname, type='W', value='PRESS', alt=True, shift=True)
    _keymaps.append((km, kmi))


def unregister_keymaps():
    for km, kmi in _keymaps:
        km.keymap_items.remove(kmi)
    _keymaps.clear()
