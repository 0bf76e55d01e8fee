# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from __future__ import annotations
from dataclasses import dataclass, field
from typing import NamedTuple, List, Optional, Union
import numpy as np

from . import collada_util as U
from .collada_skeleton import Skeleton
from ..core.errors import StructuralError


class InstanceController(NamedTuple):
  url: str
  skeleton: str

  @property
  def controller_id(self):
    return U.strip_ref(self.url)

  @property
  def skeleton_root(self):
    return U.strip_ref(self.skeleton)

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'instance_controller')
    url = U.require_attr(el, 'url')
    sk = U.single_child(el, 'skeleton')
    if not sk.text or not sk.text.strip():
      raise StructuralError("<skeleton> names no root joint", ref=url)
    return cls(url, sk.text.strip())


# Node payloads
@dataclass
class MultiNode:
  transform: np.ndarray
  children: List["SceneNode"] = field(default_factory=list)

@dataclass
class ObjectInstance:
  transform: np.ndarray
  controller: InstanceController

class OtherNode:
  def __repr__(self):
    return "OtherNode()"

NodeData = Union[MultiNode, ObjectInstance, Skeleton, OtherNode]


@dataclass
class SceneNode:
  id: Optional[str]
  name: Optional[str]
  data: NodeData

  def walk(self):
    """This node and every descendant, depth-first."""
    yield self
    if isinstance(self.data, MultiNode):
      for child in self.data.children:
        yield from child.walk()

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'node')
    nid = el.get('id')
    name = el.get('name')
    if el.get('type') == 'JOINT':
      return cls(nid, name, Skeleton.parse(el))

    transform = U.parse_transformation(el)
    controllers = U.children_named(el, 'instance_controller')
    if len(controllers) > 1:
      raise StructuralError("<node> has more than one <instance_controller>", ref=nid)
    if controllers:
      return cls(nid, name, ObjectInstance(transform, InstanceController.parse(controllers[0])))

    children = [cls.parse(c) for c in U.children_named(el, 'node')]
    if not children:
      return cls(nid, name, OtherNode())
    return cls(nid, name, MultiNode(transform, children))


@dataclass
class VisualScene:
  id: str
  name: Optional[str] = None
  nodes: List[SceneNode] = field(default_factory=list)

  def walk(self):
    for node in self.nodes:
      yield from node.walk()

  def skeletons(self):
    return [n.data for n in self.walk() if isinstance(n.data, Skeleton)]

  def skeleton_with_root(self, joint_id):
    for skeleton in self.skeletons():
      root = skeleton.root
      if root is not None and root.id == joint_id:
        return skeleton
    return None

  def object_instances(self):
    return [n for n in self.walk() if isinstance(n.data, ObjectInstance)]

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'visual_scene')
    sid = U.require_attr(el, 'id')
    nodes = [SceneNode.parse(c) for c in U.children_named(el, 'node')]
    return cls(sid, el.get('name'), nodes)
