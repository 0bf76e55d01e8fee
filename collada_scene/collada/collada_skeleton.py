# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np

from . import collada_util as U


@dataclass
class SkeletonNode:
  id: str
  parent: Optional[int]
  default_trans: np.ndarray
  children: List[int] = field(default_factory=list)


class Skeleton:
  """
  Joint hierarchy stored as a flat pre-order arena. Index 0 is the root and
  every node's parent has a smaller index than the node itself.
  """

  def __init__(self, id):
    self.id = id
    self.nodes: List[SkeletonNode] = []

  def __repr__(self):
    return f"Skeleton(id={self.id!r}, nodes={[n.id for n in self.nodes]})"

  def __len__(self):
    return len(self.nodes)

  @property
  def root(self):
    return self.nodes[0] if self.nodes else None

  def node_index(self, name):
    for i, node in enumerate(self.nodes):
      if node.id == name:
        return i
    return None

  def node_with_name(self, name):
    i = self.node_index(name)
    return None if i is None else self.nodes[i]

  def parent_of(self, index):
    parent = self.nodes[index].parent
    return None if parent is None else self.nodes[parent]

  def parse_node(self, el, parent=None):
    U.expect_tag(el, 'node')
    index = len(self.nodes)
    self.nodes.append(SkeletonNode(U.require_attr(el, 'id'), parent, U.parse_transformation(el)))
    for child in U.children_named(el, 'node'):
      self.nodes[index].children.append(self.parse_node(child, index))
    return index

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'node')
    skeleton = cls(U.require_attr(el, 'id'))
    skeleton.parse_node(el)
    return skeleton
