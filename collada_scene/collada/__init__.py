# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from .collada_reader import Accessor, DataSource
from .collada_index import (
  CornerIndex, Triangle, Line, TriFan, TriStrip,
  IndexAccessor, PrimitiveIndices, PrimitiveElement, PrimitiveType,
)
from .collada_vertices import Vertices
from .collada_mesh import Vector3, GenericMesh, MeshParser, Geometry, parse_mesh
from .collada_skin import JointWeight, VertexWeights, Skin, Controller
from .collada_skeleton import Skeleton, SkeletonNode
from .collada_animation import Animation, SubAnimation
from .collada_scene import (
  InstanceController, SceneNode, MultiNode, ObjectInstance, OtherNode, VisualScene,
)
from .collada_document import Asset, Document
