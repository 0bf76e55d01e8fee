# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from typing import NamedTuple, List, Optional

from . import collada_util as U


class VertexInput(NamedTuple):
  semantic: str
  source: str


class Vertices:
  def __init__(self, id, inputs):
    self.id = id
    self.inputs: List[VertexInput] = list(inputs)
    self.semantics_map: List[int] = []
    self.count: Optional[int] = None

  def __repr__(self):
    return f"Vertices(id={self.id!r}, inputs={self.inputs}, count={self.count})"

  def unresolved(self, sources):
    ids = {s.id for s in sources}
    return [i.source for i in self.inputs if U.strip_ref(i.source) not in ids]

  def map_semantics(self, sources):
    """
    Bind every input to its position in `sources`. Returns False when an
    input does not resolve or the resolved sources disagree on count.
    """
    self.semantics_map = []
    self.count = None
    count = None
    for inp in self.inputs:
      name = U.strip_ref(inp.source)
      pos = next((i for i, s in enumerate(sources) if s.id == name), None)
      if pos is None:
        self.semantics_map = []
        return False
      if count is None:
        count = sources[pos].count
      elif count != sources[pos].count:
        self.semantics_map = []
        return False
      self.semantics_map.append(pos)
    self.count = count
    return True

  def get_nth_attributes(self, n, sources):
    # (semantic, parameter names, record or None)
    for inp, pos in zip(self.inputs, self.semantics_map):
      src = sources[pos]
      yield inp.semantic, src.params, src.get_nth(n)

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'vertices')
    vid = U.require_attr(el, 'id')
    inputs = []
    for inp in U.children_named(el, 'input'):
      inputs.append(VertexInput(U.require_attr(inp, 'semantic'), U.require_attr(inp, 'source')))
    return cls(vid, inputs)
