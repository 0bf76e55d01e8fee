# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from enum import Enum
from typing import NamedTuple, Optional, Tuple, List

from . import collada_util as U
from .collada_util import Input
from ..core.errors import StructuralError, ConsistencyError


class CornerIndex(NamedTuple):
  position: int
  tex_coord: Optional[int] = None
  normal: Optional[int] = None
  color: Optional[int] = None


# Shape variants. Only Triangle and Line are produced by the decoder.
class Triangle(NamedTuple):
  a: CornerIndex
  b: CornerIndex
  c: CornerIndex

class Line(NamedTuple):
  a: CornerIndex
  b: CornerIndex

class TriFan(NamedTuple):
  corners: Tuple[CornerIndex, ...]

class TriStrip(NamedTuple):
  corners: Tuple[CornerIndex, ...]


_OPTIONAL_SEMANTICS = ('TEXCOORD', 'NORMAL', 'COLOR')

class IndexAccessor:
  """
  Which slot of every interleaved index group belongs to which semantic.

  VERTEX must be present once, TEXCOORD/NORMAL/COLOR at most once each, and
  the offsets of the present inputs must be exactly 0..components-1.
  """

  def __init__(self, vertex: Input, tex_coord: Optional[Input] = None,
               normal: Optional[Input] = None, color: Optional[Input] = None):
    self.vertex = vertex
    self.tex_coord = tex_coord
    self.normal = normal
    self.color = color
    self.components = 1 + sum(i is not None for i in (tex_coord, normal, color))
    if not self.no_duplicates():
      raise ConsistencyError(f"input offsets are not distinct: {self.offsets()}")
    if not self.has_valid_offsets():
      raise ConsistencyError(
        f"input offsets {self.offsets()} do not cover 0..{self.components - 1}")

  def _inputs(self):
    return (self.vertex, self.tex_coord, self.normal, self.color)

  def offsets(self):
    return tuple(i.offset if i is not None else None for i in self._inputs())

  def sources(self):
    """(vertex, tex_coord, normal, color) source references, as written."""
    return tuple(i.source if i is not None else None for i in self._inputs())

  def no_duplicates(self):
    present = [o for o in self.offsets() if o is not None]
    return len(present) == len(set(present))

  def has_valid_offsets(self):
    present = {o for o in self.offsets() if o is not None}
    return present == set(range(self.components))

  def get_nth_corner(self, n, indices) -> Optional[CornerIndex]:
    start = n * self.components
    if n < 0 or start + self.components > len(indices):
      return None
    fields = [None if o is None else int(indices[start + o]) for o in self.offsets()]
    return CornerIndex(*fields)

  @classmethod
  def parse(cls, el):
    found = {}
    for inp in U.children_named(el, 'input'):
      offset = U.uint_attr(inp, 'offset')
      source = U.require_attr(inp, 'source')
      sem = inp.get('semantic')
      if sem != 'VERTEX' and sem not in _OPTIONAL_SEMANTICS:
        continue
      if sem in found:
        raise StructuralError(f"<{U.tag_name(el)}> declares {sem} more than once")
      found[sem] = Input(source, offset)
    if 'VERTEX' not in found:
      raise StructuralError(f"<{U.tag_name(el)}> has no VERTEX input")
    return cls(found['VERTEX'], found.get('TEXCOORD'), found.get('NORMAL'), found.get('COLOR'))


class PrimitiveIndices:
  def __init__(self, accessor: IndexAccessor, indices):
    if len(indices) % accessor.components != 0:
      raise ConsistencyError(
        f"{len(indices)} indices is not a multiple of {accessor.components} components")
    self.accessor = accessor
    self.indices = indices
    self.corner_count = len(indices) // accessor.components

  def __len__(self):
    return self.corner_count

  def get_nth_corner(self, n):
    return self.accessor.get_nth_corner(n, self.indices)

  def sources(self):
    return self.accessor.sources()

  @classmethod
  def parse(cls, el):
    accessor = IndexAccessor.parse(el)
    p = U.single_child(el, 'p', required=False)
    indices = U.parse_uints_np(p.text if p is not None else None)
    return cls(accessor, indices)


class PrimitiveType(Enum):
  TRIANGLES = 'triangles'
  LINES = 'lines'

_CORNERS_PER_SHAPE = {PrimitiveType.TRIANGLES: 3, PrimitiveType.LINES: 2}


class PrimitiveElement:
  def __init__(self, count, indices: PrimitiveIndices, p_type: PrimitiveType):
    per = _CORNERS_PER_SHAPE[p_type]
    if len(indices) % per != 0:
      raise ConsistencyError(
        f"{len(indices)} corners do not form whole {p_type.value} of {per}")
    self.count = count
    self.indices = indices
    self.p_type = p_type

  def __repr__(self):
    return (f"PrimitiveElement({self.p_type.value}, count={self.count}, "
            f"sources={self.sources()})")

  def sources(self):
    return self.indices.sources()

  def get_nth_shape(self, n):
    per = _CORNERS_PER_SHAPE[self.p_type]
    start = n * per
    if n < 0 or start + per > len(self.indices):
      return None
    corners = [self.indices.get_nth_corner(start + k) for k in range(per)]
    if any(c is None for c in corners):
      return None
    if self.p_type is PrimitiveType.TRIANGLES:
      return Triangle(*corners)
    return Line(*corners)

  def shapes(self) -> List:
    out = []
    for i in range(self.count):
      shape = self.get_nth_shape(i)
      if shape is None:
        break
      out.append(shape)
    return out

  @classmethod
  def parse(cls, el):
    t = U.tag_name(el)
    try:
      p_type = PrimitiveType(t)
    except ValueError:
      raise StructuralError(f"<{t}> is not a supported primitive element")
    count = U.uint_attr(el, 'count')
    return cls(count, PrimitiveIndices.parse(el), p_type)
