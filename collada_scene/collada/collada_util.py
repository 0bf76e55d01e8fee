# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from typing import NamedTuple
import numpy as np

from ..core.errors import (
  StructuralError, LiteralParseError, missing_attribute,
)

REF_MARKER = '#'

def tag_name(el):
  if el is None or el.tag is None or not isinstance(el.tag, str):
    return ""
  return el.tag.split('}', 1)[-1]

def expect_tag(el, name):
  t = tag_name(el)
  if t != name:
    raise StructuralError(f"expected <{name}>, found <{t}>", ref=el.get('id'))

def children_named(el, name):
  return [c for c in el if tag_name(c) == name]

def single_child(el, name, required=True):
  found = children_named(el, name)
  if len(found) > 1:
    raise StructuralError(f"<{tag_name(el)}> has more than one <{name}>", ref=el.get('id'))
  if not found:
    if required:
      raise StructuralError(f"<{tag_name(el)}> is missing <{name}>", ref=el.get('id'))
    return None
  return found[0]

def require_attr(el, name):
  val = el.get(name)
  if val is None:
    raise missing_attribute(tag_name(el), name, ref=el.get('id'))
  return val

def uint_attr(el, name):
  text = require_attr(el, name)
  try:
    val = int(text)
  except ValueError:
    val = -1
  if val < 0:
    raise StructuralError(f"<{tag_name(el)}> @{name}='{text}' is not a non-negative integer",
                          ref=el.get('id'), attribute=name)
  return val

def strip_ref(ref):
  """'#Cube-mesh' -> 'Cube-mesh'. Only one leading marker is removed."""
  if ref is None:
    return None
  ref = ref.strip()
  if ref.startswith(REF_MARKER):
    return ref[1:]
  return ref

def _tokens(text):
  if not text:
    return []
  return text.split()

def parse_floats_np(text, dtype=np.float32):
  out = []
  for tok in _tokens(text):
    try:
      out.append(float(tok))
    except ValueError:
      raise LiteralParseError(f"'{tok}' is not a number")
  return np.array(out, dtype=dtype)

def parse_ints_np(text, dtype=np.int64):
  out = []
  for tok in _tokens(text):
    try:
      out.append(int(tok))
    except ValueError:
      raise LiteralParseError(f"'{tok}' is not an integer")
  return np.array(out, dtype=dtype)

def parse_uints_np(text, dtype=np.int64):
  a = parse_ints_np(text, dtype=dtype)
  if a.size and int(a.min()) < 0:
    raise LiteralParseError(f"negative index {int(a.min())} in index list")
  return a

def parse_names(text):
  return _tokens(text)

def matrix_from_values(values):
  vals = np.asarray(values, dtype=np.float32).ravel()
  if vals.size != 16:
    raise LiteralParseError(f"expected 16 matrix values, got {vals.size}")
  return vals.reshape((4, 4)).copy()

def parse_matrix(text):
  return matrix_from_values(parse_floats_np(text))

def _fixed_floats(el, n):
  vals = parse_floats_np(el.text)
  if vals.size != n:
    raise LiteralParseError(f"<{tag_name(el)}> expects {n} values, got {vals.size}")
  return vals

_AXIS_COLUMN = {'X': 0, 'Y': 1, 'Z': 2}

def parse_transformation(node_el):
  """
  Local transform of a <node>. Operators are applied to an identity matrix in
  document order and each one overwrites only the components it targets:
    matrix    -> all 16 values
    translate -> column 3, rows 0..2
    rotate    -> column picked by the last sid character (X/Y/Z)
    scale     -> upper 3x3 columns scaled per axis
  """
  m = np.identity(4, dtype=np.float32)
  seen = set()
  for el in node_el:
    t = tag_name(el)
    if t in ('matrix', 'translate', 'scale'):
      if t in seen:
        raise StructuralError(f"<node> has more than one <{t}>", ref=node_el.get('id'))
      seen.add(t)
    if t == 'matrix':
      m = parse_matrix(el.text)
    elif t == 'translate':
      m[0:3, 3] = _fixed_floats(el, 3)
    elif t == 'rotate':
      vals = _fixed_floats(el, 4)
      sid = require_attr(el, 'sid')
      col = _AXIS_COLUMN.get(sid[-1:])
      if col is not None:
        m[:, col] = vals
    elif t == 'scale':
      s = _fixed_floats(el, 3)
      for i in range(3):
        m[0:3, i] *= s[i]
  return m


class Input(NamedTuple):
  source: str
  offset: int
