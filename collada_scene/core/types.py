# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Any

@dataclass
class DecodeConfig:
  vertex_type: Any = None
  verbose: bool = False
  strict_skin_mesh: bool = False

  def __post_init__(self):
    if self.vertex_type is None:
      from ..collada.collada_mesh import Vector3
      self.vertex_type = Vector3
