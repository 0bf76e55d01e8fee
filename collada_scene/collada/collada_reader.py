# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from typing import List
import numpy as np

from . import collada_util as U
from ..core.errors import StructuralError

FLOAT_ARRAY = 'float_array'
NAME_ARRAY = 'Name_array'
IDREF_ARRAY = 'IDREF_array'
INT_ARRAY = 'int_array'

class Accessor:
  """Fixed-size record layout over a flat literal array."""

  def __init__(self, count, stride, params):
    self.count = count
    self.stride = stride
    self.params: List[str] = list(params)

  def __repr__(self):
    return f"Accessor(count={self.count}, stride={self.stride}, params={self.params})"

  def get_nth(self, n, array):
    """Record n as a slice of `array`, or None once it runs past the end."""
    if n < 0:
      return None
    start = n * self.stride
    end = start + self.stride
    if end > len(array):
      return None
    return array[start:end]

  def param_index(self, name):
    try:
      return self.params.index(name)
    except ValueError:
      return None

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'accessor')
    count = U.uint_attr(el, 'count')
    stride = U.uint_attr(el, 'stride')
    params = [p.get('name') or '' for p in U.children_named(el, 'param')]
    return cls(count, stride, params)


def _parse_literal_array(el, array_tag):
  if array_tag in (NAME_ARRAY, IDREF_ARRAY):
    return U.parse_names(el.text)
  if array_tag == INT_ARRAY:
    return U.parse_ints_np(el.text)
  return U.parse_floats_np(el.text)


class DataSource:
  def __init__(self, id, array, accessor):
    self.id = id
    self.array = array
    self.accessor = accessor

  def __repr__(self):
    return f"DataSource(id={self.id!r}, len={len(self.array)}, {self.accessor!r})"

  @property
  def count(self):
    return self.accessor.count

  @property
  def params(self):
    return self.accessor.params

  def get_nth(self, n):
    return self.accessor.get_nth(n, self.array)

  def iterate(self):
    # a zero stride never runs past the end
    if self.accessor.stride <= 0:
      return
    n = 0
    while True:
      rec = self.get_nth(n)
      if rec is None:
        return
      yield rec
      n += 1

  def __iter__(self):
    return self.iterate()

  def project(self, names, dtype=np.float32):
    """
    Every record reduced to the named parameters, in source order.
    Returns None when a name is not among the accessor params.
    """
    cols = [self.accessor.param_index(n) for n in names]
    if any(c is None for c in cols):
      return None
    rows = [[rec[c] for c in cols] for rec in self.iterate()]
    return np.array(rows, dtype=dtype).reshape((-1, len(cols)))

  @classmethod
  def parse_source(cls, el, array_tag=FLOAT_ARRAY):
    U.expect_tag(el, 'source')
    sid = U.require_attr(el, 'id')
    array = None
    accessor = None
    for child in el:
      t = U.tag_name(child)
      if t == array_tag:
        if array is not None:
          raise StructuralError(f"more than one <{array_tag}>", ref=sid)
        array = _parse_literal_array(child, array_tag)
      elif t == 'technique_common':
        if accessor is not None:
          raise StructuralError("more than one <technique_common>", ref=sid)
        inner = list(child)
        if not inner:
          raise StructuralError("<technique_common> holds no <accessor>", ref=sid)
        accessor = Accessor.parse(inner[0])
    if array is None:
      raise StructuralError(f"<source> has no <{array_tag}>", ref=sid)
    if accessor is None:
      raise StructuralError("<source> has no <technique_common>", ref=sid)
    return cls(sid, array, accessor)


def source_array_tag(el):
  """The literal array kind a <source> carries, or None."""
  for child in el:
    t = U.tag_name(child)
    if t in (FLOAT_ARRAY, NAME_ARRAY, IDREF_ARRAY, INT_ARRAY):
      return t
  return None
