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


# tilewfc - edge-matching Wave Function Collapse for 2D tile grids
#
#     catalog = TileCatalog.from_edges([(EdgeType.A,) * 4, (EdgeType.B,) * 4])
#     result = generate(catalog, EdgeCompatibilityTable.identity(), 8, 8, random.Random(1))
#     result.tile_indices()
#
# The Blender add-on in tilewfc.blender turns results into placed meshes.

import logging

from .core import (
    CellStateError,
    ConfigurationError,
    EdgeCompatibilityTable,
    EdgeType,
    GenerationConfig,
    GenerationResult,
    GenerationStatus,
    TerminationReason,
    TileCatalog,
    TileDefinition,
    ValidationResult,
    WFCEngine,
    WFCError,
    generate,
    generate_from_config,
    parse_compatibility_rules,
)

__version__ = "0.2.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
