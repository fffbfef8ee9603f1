import bpy


class TileWFCSettings(bpy.types.PropertyGroup):
    source_collection: bpy.props.PointerProperty(name="Tile Collection", type=bpy.types.Collection)
    output_collection_name: bpy.props.StringProperty(name="Output Collection", default="WFC_Tiles")
    width: bpy.props.IntProperty(name="Width", default=10, min=1)
    height: bpy.props.IntProperty(name="Height", default=10, min=1)
    cell_size: bpy.props.FloatProperty(name="Cell Size", default=1.0, min=0.001)
    use_seed: bpy.props.BoolProperty(name="Use Seed", default=True)
    random_seed: bpy.props.IntProperty(name="Seed", default=42)
    compatibility_rules: bpy.props.StringProperty(
        name="Edge Rules",
        description="Which edge type connects to which, e.g. A=A, B=C, C=B",
        default="A=A, B=B, C=C, D=D",
    )
    clear_output: bpy.props.BoolProperty(name="Clear Output", default=True)


class TILEWFC_PT_Panel(bpy.types.Panel):
    bl_label = "Tile WFC"
    bl_idname = "TILEWFC_PT_panel"
    bl_space_type = 'VIEW_3D'
    bl_region_type = 'UI'
    bl_category = 'Tile WFC'

    def draw(self, context):
        layout = self.layout
        cfg = context.scene.tile_wfc
        col = layout.column(align=True)
        col.prop(cfg, "source_collection")
        col.prop(cfg, "output_collection_name")
        grid = layout.box()
        grid.label(text="Grid")
        row = grid.row(align=True)
        row.prop(cfg, "width")
        row.prop(cfg, "height")
        grid.prop(cfg, "cell_size")
        rules = layout.box()
        rules.label(text="Edge Compatibility")
        rules.prop(cfg, "compatibility_rules", text="")
        rnd = layout.box()
        rnd.label(text="Randomness")
        rnd.prop(cfg, "use_seed")
        sub = rnd.column()
        sub.active = cfg.use_seed
        sub.prop(cfg, "random_seed")
        layout.prop(cfg, "clear_output")
        layout.operator("tile_wfc.generate", icon='MESH_GRID')
        layout.separator()
        layout.operator("tile_wfc.add_props", icon='PLUS')
