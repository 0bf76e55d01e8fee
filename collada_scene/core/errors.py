# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from __future__ import annotations
from typing import Optional


class ColladaError(Exception):
  """Base error for everything raised while decoding a document."""
  def __init__(self, msg, stage: Optional[str] = None, ref: Optional[str] = None,
               attribute: Optional[str] = None):
    super().__init__(msg)
    self.msg = msg
    self.stage = stage
    self.ref = ref
    self.attribute = attribute

  def in_stage(self, stage, ref=None):
    if self.stage is None:
      self.stage = stage
    if self.ref is None:
      self.ref = ref
    return self

  def __str__(self):
    where = ''
    if self.stage:
      where = f"[{self.stage}" + (f" '{self.ref}'" if self.ref else '') + "] "
    elif self.ref:
      where = f"['{self.ref}'] "
    return type(self).__name__ + ': ' + where + self.msg


class StructuralError(ColladaError):
  """Wrong or missing tag, missing mandatory attribute or child, illegal duplicate."""
  pass


class LiteralParseError(ColladaError):
  """A literal token does not convert to its target type."""
  pass


class UnresolvedReferenceError(ColladaError):
  """An id reference resolves to nothing of the expected kind."""
  pass


class ConsistencyError(ColladaError):
  """Sibling or cross-library data disagree with each other."""
  pass


def missing_attribute(el_tag, name, ref=None):
  return StructuralError(f"<{el_tag}> is missing attribute '{name}'", ref=ref, attribute=name)
