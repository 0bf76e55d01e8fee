# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from .errors import (
  ColladaError, StructuralError, LiteralParseError,
  UnresolvedReferenceError, ConsistencyError,
)
from .types import DecodeConfig
from .progress import ProgressHelper
