# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

__version__ = "0.1.0"

from .core import (
  ColladaError, StructuralError, LiteralParseError,
  UnresolvedReferenceError, ConsistencyError, DecodeConfig,
)
from .collada import *


def load(path, config=None):
  return Document.load(path, config)

def loads(text, config=None):
  return Document.loads(text, config)
