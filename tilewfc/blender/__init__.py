'''
Copyright (C) 2025 Fadi SULTAN
fadi.sultan@outlook.com

Created by Fadi SULTAN

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
    GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this program.  If not, see <http://www.gnu.org/licenses/>.
'''

bl_info = {
    "name": "Tile WFC Generator",
    "author": "Fadi SULTAN",
    "version": (0, 2, 0),
    "blender": (3, 0, 0),
    "location": "3D View > N-Panel > Tile WFC",
    "description": "Edge-matching Wave Function Collapse: fills a 2D grid with tiles whose touching edges are compatible.",
    "warning": "This addon is still in development.",
    "category": "Object" }

import bpy
import logging
import traceback

from .addon_operator import classes as _addon_classes, register_keymaps, unregister_keymaps
from .ui_manager import TileWFCSettings, TILEWFC_PT_Panel
from ..logging_config import setup_logging, teardown_logging

logger = logging.getLogger(__name__)


# register
##################################

def _all_classes():
    return _addon_classes + (TileWFCSettings, TILEWFC_PT_Panel)


def register():
    setup_logging(logging.INFO)
    registered = []
    try:
        for cls in _all_classes():
            bpy.utils.register_class(cls)
            registered.append(cls)
        bpy.types.Scene.tile_wfc = bpy.props.PointerProperty(type=TileWFCSettings)
        register_keymaps()
    except Exception:
        traceback.print_exc()
        # roll back so a retry starts from a clean slate
        unregister_keymaps()
        if hasattr(bpy.types.Scene, "tile_wfc"):
            del bpy.types.Scene.tile_wfc
        for cls in reversed(registered):
            bpy.utils.unregister_class(cls)
        teardown_logging()
        raise
    logger.info("Registered %s", bl_info["name"])


def unregister():
    unregister_keymaps()
    if hasattr(bpy.types.Scene, "tile_wfc"):
        del bpy.types.Scene.tile_wfc
    for cls in reversed(_all_classes()):
        bpy.utils.unregister_class(cls)
    logger.info("Unregistered %s", bl_info["name"])
    teardown_logging()
