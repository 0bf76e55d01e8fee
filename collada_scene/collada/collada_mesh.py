# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from __future__ import annotations
from dataclasses import dataclass, field
from typing import NamedTuple, List, Optional, Any
import numpy as np

from . import collada_util as U
from .collada_reader import DataSource
from .collada_vertices import Vertices
from .collada_index import PrimitiveElement, PrimitiveType, Triangle, Line
from ..core.errors import (
  StructuralError, UnresolvedReferenceError, ConsistencyError,
)


class Vector3(NamedTuple):
  """Position-only vertex. Reads X/Y/Z from the single POSITION input."""
  x: float
  y: float
  z: float

  @classmethod
  def from_attributes(cls, attributes) -> Optional["Vector3"]:
    found = None
    for semantic, params, data in attributes:
      if semantic != 'POSITION':
        continue
      if found is not None or data is None:
        return None
      try:
        ix, iy, iz = params.index('X'), params.index('Y'), params.index('Z')
      except ValueError:
        return None
      if max(ix, iy, iz) >= len(data):
        return None
      found = cls(float(data[ix]), float(data[iy]), float(data[iz]))
    return found


@dataclass
class GenericMesh:
  vertices: List[Any]
  normals: np.ndarray
  tex_coords: np.ndarray
  colors: np.ndarray
  shapes: list = field(default_factory=list)

  def triangles(self):
    return [s for s in self.shapes if isinstance(s, Triangle)]

  def lines(self):
    return [s for s in self.shapes if isinstance(s, Line)]


def _empty(n):
  return np.empty((0, n), dtype=np.float32)


class MeshParser:
  def __init__(self, sources, vertices, primitive_elements):
    self.sources: List[DataSource] = sources
    self.vertices: Vertices = vertices
    self.primitive_elements: List[PrimitiveElement] = primitive_elements

  def source_with_id(self, ref):
    name = U.strip_ref(ref)
    for s in self.sources:
      if s.id == name:
        return s
    return None

  def _require_source(self, ref, what):
    src = self.source_with_id(ref)
    if src is None:
      raise UnresolvedReferenceError(f"{what} source '{ref}' is not declared in the mesh")
    return src

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'mesh')
    sources = []
    vertices = None
    prims = []
    for child in el:
      t = U.tag_name(child)
      if t == 'source':
        sources.append(DataSource.parse_source(child))
      elif t == 'vertices':
        if vertices is not None:
          raise StructuralError("<mesh> has more than one <vertices>")
        vertices = Vertices.parse(child)
      elif t in (PrimitiveType.TRIANGLES.value, PrimitiveType.LINES.value):
        prims.append(PrimitiveElement.parse(child))
    if vertices is None:
      raise StructuralError("<mesh> has no <vertices>")
    if not vertices.map_semantics(sources):
      missing = vertices.unresolved(sources)
      if missing:
        raise UnresolvedReferenceError(
          f"<vertices> input source '{missing[0]}' is not declared in the mesh", ref=vertices.id)
      raise ConsistencyError("<vertices> input sources disagree on count", ref=vertices.id)
    return cls(sources, vertices, prims)

  def _shared_sources(self):
    if not self.primitive_elements:
      raise StructuralError("<mesh> has no <triangles> or <lines>")
    first = self.primitive_elements[0].sources()
    if U.strip_ref(first[0]) != self.vertices.id:
      raise ConsistencyError(
        f"VERTEX input '{first[0]}' does not reference <vertices> '{self.vertices.id}'")
    for prim in self.primitive_elements[1:]:
      if prim.sources() != first:
        raise ConsistencyError(
          f"primitive lists reference different sources: {first} vs {prim.sources()}")
    return first

  def _build_vertices(self, vertex_type):
    if self.vertices.count is None:
      raise StructuralError("<vertices> has no inputs", ref=self.vertices.id)
    out = []
    for i in range(self.vertices.count):
      v = vertex_type.from_attributes(self.vertices.get_nth_attributes(i, self.sources))
      if v is None:
        raise ConsistencyError(f"vertex {i} has no usable POSITION", ref=self.vertices.id)
      out.append(v)
    return out

  def _project(self, ref, names, what):
    src = self._require_source(ref, what)
    arr = src.project(names)
    if arr is None:
      raise StructuralError(f"{what} source lacks parameters {list(names)}", ref=src.id)
    return arr

  def _colors(self, ref):
    src = self._require_source(ref, 'COLOR')
    arr = src.project(('R', 'G', 'B'))
    if arr is not None:
      return arr
    if src.accessor.stride < 3:
      raise StructuralError("COLOR source has fewer than 3 components", ref=src.id)
    return np.array([rec[:3] for rec in src.iterate()], dtype=np.float32).reshape((-1, 3))

  def into_mesh(self, vertex_type=Vector3) -> GenericMesh:
    _, tex_ref, normal_ref, color_ref = self._shared_sources()
    shapes = []
    for prim in self.primitive_elements:
      shapes.extend(prim.shapes())

    vertices = self._build_vertices(vertex_type)
    normals = self._project(normal_ref, ('X', 'Y', 'Z'), 'NORMAL') if normal_ref else _empty(3)
    tex_coords = self._project(tex_ref, ('S', 'T'), 'TEXCOORD') if tex_ref else _empty(2)
    colors = self._colors(color_ref) if color_ref else _empty(3)
    return GenericMesh(vertices, normals, tex_coords, colors, shapes)


def parse_mesh(el, vertex_type=Vector3):
  return MeshParser.parse(el).into_mesh(vertex_type)


class Geometry(NamedTuple):
  id: str
  name: Optional[str]
  mesh: GenericMesh

  @classmethod
  def parse(cls, el, vertex_type=Vector3):
    U.expect_tag(el, 'geometry')
    gid = U.require_attr(el, 'id')
    mesh_el = U.single_child(el, 'mesh')
    return cls(gid, el.get('name'), parse_mesh(mesh_el, vertex_type))
