# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple, List, Optional
import numpy as np

from . import collada_util as U
from .collada_reader import DataSource, FLOAT_ARRAY, NAME_ARRAY, IDREF_ARRAY, source_array_tag
from ..core.errors import (
  StructuralError, ConsistencyError, UnresolvedReferenceError,
)


class JointWeight(NamedTuple):
  joint: int
  weight: float


class VertexWeights:
  """
  Per-vertex (joint, weight) index pairs. Each vertex has its own number of
  pairs, so vertex i starts at 2 * sum(vcount[:i]) in `v`.
  """

  def __init__(self, count, joint_offset, weight_offset, vcount, v, weight_source=None):
    if {joint_offset, weight_offset} != {0, 1}:
      raise ConsistencyError(
        f"JOINT/WEIGHT offsets must be 0 and 1, got {joint_offset} and {weight_offset}")
    if len(vcount) != count:
      raise ConsistencyError(f"vcount lists {len(vcount)} vertices, count is {count}")
    expected = 2 * int(np.sum(vcount)) if len(vcount) else 0
    if len(v) != expected:
      raise ConsistencyError(f"<v> holds {len(v)} indices, vcount needs {expected}")
    self.count = count
    self.joint_offset = joint_offset
    self.weight_offset = weight_offset
    self.vcount = vcount
    self.v = v
    self.weight_source = weight_source
    self._starts = np.concatenate(([0], 2 * np.cumsum(vcount)))[:-1].astype(np.int64) \
      if len(vcount) else np.empty(0, dtype=np.int64)

  def start_offsets(self):
    return self._starts

  def get_nth_indices(self, n):
    """(joint index, weight index) pairs of vertex n, or None past the end."""
    if n < 0 or n >= self.count:
      return None
    start = int(self._starts[n])
    out = []
    for k in range(int(self.vcount[n])):
      pair = self.v[start + 2 * k:start + 2 * k + 2]
      out.append((int(pair[self.joint_offset]), int(pair[self.weight_offset])))
    return out

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'vertex_weights')
    count = U.uint_attr(el, 'count')
    joints = weights = None
    weight_source = None
    for inp in U.children_named(el, 'input'):
      sem = U.require_attr(inp, 'semantic')
      if sem == 'JOINT':
        joints = U.uint_attr(inp, 'offset')
      elif sem == 'WEIGHT':
        weights = U.uint_attr(inp, 'offset')
        weight_source = inp.get('source')
    if joints is None or weights is None:
      raise StructuralError("<vertex_weights> needs both JOINT and WEIGHT inputs")
    vc = U.single_child(el, 'vcount', required=False)
    v = U.single_child(el, 'v', required=False)
    vcount = U.parse_uints_np(vc.text if vc is not None else None)
    v = U.parse_uints_np(v.text if v is not None else None)
    return cls(count, joints, weights, vcount, v, weight_source)


def _input_source(parent, semantic):
  if parent is None:
    return None
  for inp in U.children_named(parent, 'input'):
    if inp.get('semantic') == semantic:
      return U.strip_ref(U.require_attr(inp, 'source'))
  return None


@dataclass
class Skin:
  source: str
  bind_shape_matrix: np.ndarray
  joint_names: List[str]
  bind_poses: List[np.ndarray]
  vertex_weights: List[List[JointWeight]]

  @property
  def mesh_id(self):
    return U.strip_ref(self.source)

  @classmethod
  def parse(cls, el, controller_id):
    U.expect_tag(el, 'skin')
    mesh_ref = U.require_attr(el, 'source')
    bsm = U.single_child(el, 'bind_shape_matrix')
    bind_shape_matrix = U.parse_matrix(bsm.text)

    sources = {}
    for s in U.children_named(el, 'source'):
      sources[U.require_attr(s, 'id')] = s
    joints_el = U.single_child(el, 'joints', required=False)
    vw = VertexWeights.parse(U.single_child(el, 'vertex_weights'))

    def pick(ref, suffix, what):
      ref = ref or controller_id + suffix
      src = sources.get(ref)
      if src is None:
        raise UnresolvedReferenceError(f"{what} source '{ref}' is not declared in the skin",
                                       ref=controller_id)
      return src

    names_el = pick(_input_source(joints_el, 'JOINT'), '-joints', 'JOINT')
    tag = source_array_tag(names_el)
    names = DataSource.parse_source(names_el, tag if tag in (NAME_ARRAY, IDREF_ARRAY) else NAME_ARRAY)
    poses = DataSource.parse_source(
      pick(_input_source(joints_el, 'INV_BIND_MATRIX'), '-bind_poses', 'INV_BIND_MATRIX'), FLOAT_ARRAY)
    weights = DataSource.parse_source(
      pick(U.strip_ref(vw.weight_source), '-weights', 'WEIGHT'), FLOAT_ARRAY)

    joint_names = [str(rec[0]) for rec in names.iterate()]
    bind_poses = [U.matrix_from_values(rec) for rec in poses.iterate()]
    if len(bind_poses) != len(joint_names):
      raise ConsistencyError(
        f"{len(bind_poses)} bind poses for {len(joint_names)} joints", ref=controller_id)

    vertex_weights = []
    for i in range(vw.count):
      pairs = []
      for j, w in vw.get_nth_indices(i):
        if j >= len(joint_names):
          raise UnresolvedReferenceError(f"vertex {i} names joint {j}, skin has {len(joint_names)}",
                                         ref=controller_id)
        rec = weights.get_nth(w)
        if rec is None or len(rec) == 0:
          raise UnresolvedReferenceError(f"vertex {i} names weight {w}, source has {weights.count}",
                                         ref=controller_id)
        pairs.append(JointWeight(j, float(rec[0])))
      vertex_weights.append(pairs)

    return cls(mesh_ref, bind_shape_matrix, joint_names, bind_poses, vertex_weights)


class Controller(NamedTuple):
  id: str
  name: Optional[str]
  skin: Skin

  @property
  def mesh_id(self):
    return self.skin.mesh_id

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'controller')
    cid = U.require_attr(el, 'id')
    skin_el = U.single_child(el, 'skin')
    return cls(cid, el.get('name'), Skin.parse(skin_el, cid))
