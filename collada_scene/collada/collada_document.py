# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from __future__ import annotations
from dataclasses import dataclass
import xml.etree.ElementTree as ET

from . import collada_util as U
from .collada_mesh import Geometry
from .collada_skin import Controller
from .collada_animation import Animation
from .collada_scene import VisualScene
from ..core.errors import ColladaError, LiteralParseError, ConsistencyError
from ..core.types import DecodeConfig
from ..core.progress import ProgressHelper


@dataclass
class Asset:
  unit_meter: float = 1.0
  up_axis: str = 'Y_UP'

  @classmethod
  def parse(cls, root):
    asset = root.find('.//{*}asset')
    out = cls()
    if asset is None:
      return out
    unit_el = asset.find('{*}unit')
    if unit_el is not None and unit_el.get('meter'):
      try:
        out.unit_meter = float(unit_el.get('meter'))
      except ValueError:
        raise LiteralParseError(f"unit meter '{unit_el.get('meter')}' is not a number",
                                stage='asset', attribute='meter')
    up_el = asset.find('{*}up_axis')
    if up_el is not None and up_el.text:
      out.up_axis = up_el.text.strip()
    return out


# (library tag, entry tag, stage name)
_LIBRARIES = (
  ('library_geometries', 'geometry', 'geometry'),
  ('library_animations', 'animation', 'animation'),
  ('library_controllers', 'controller', 'controller'),
  ('library_visual_scenes', 'visual_scene', 'visual_scene'),
)


class Document:
  def __init__(self, config=None):
    self.config = config or DecodeConfig()
    self.asset = Asset()
    self.geometries = {}
    self.animations = {}
    self.skins = {}
    self.scenes = []
    self.progress = ProgressHelper(enabled=self.config.verbose)

  # lookups

  def mesh_with_name(self, name):
    return self.geometries.get(U.strip_ref(name))

  def skin_with_name(self, name):
    return self.skins.get(U.strip_ref(name))

  def animations_with_target(self, target):
    return [a for a in self.animations.values() if a.has_target(target)]

  def scene_skeletons(self, n):
    return self.scenes[n].skeletons()

  def skin_skeleton_mesh(self, n):
    """
    (skin, skeleton, mesh) for every controller instance of scene n whose
    controller, mesh and root joint all resolve. Others are left out.
    """
    scene = self.scenes[n]
    out = []
    for node in scene.object_instances():
      ctrl = node.data.controller
      skin = self.skin_with_name(ctrl.controller_id)
      if skin is None:
        self.progress.info(f"controller '{ctrl.url}' of node '{node.id}' is not in the document")
        continue
      mesh = self.mesh_with_name(skin.mesh_id)
      if mesh is None:
        self.progress.info(f"skin '{ctrl.controller_id}' binds unknown mesh '{skin.source}'")
        continue
      skeleton = scene.skeleton_with_root(ctrl.skeleton_root)
      if skeleton is None:
        self.progress.info(f"no skeleton rooted at '{ctrl.skeleton}' in scene '{scene.id}'")
        continue
      if self.config.strict_skin_mesh and len(skin.vertex_weights) != len(mesh.vertices):
        raise ConsistencyError(
          f"{len(skin.vertex_weights)} weighted vertices for {len(mesh.vertices)} mesh vertices",
          stage='controller', ref=ctrl.controller_id)
      out.append((skin, skeleton, mesh))
    return out

  # decoding

  def _entries(self, root, library, entry):
    for lib in root.iterfind(f'.//{{*}}{library}'):
      for child in U.children_named(lib, entry):
        yield child

  def _decode(self, stage, el, fn):
    try:
      return fn(el)
    except ColladaError as e:
      raise e.in_stage(stage, el.get('id'))

  def _add_geometry(self, el):
    geometry = Geometry.parse(el, self.config.vertex_type)
    self.geometries[geometry.id] = geometry.mesh

  def _add_animation(self, el):
    animation = Animation.parse(el)
    self.animations[animation.id] = animation

  def _add_controller(self, el):
    controller = Controller.parse(el)
    self.skins[controller.id] = controller.skin

  def _add_scene(self, el):
    self.scenes.append(VisualScene.parse(el))

  def parse_document(self, root):
    handlers = {
      'geometry': self._add_geometry,
      'animation': self._add_animation,
      'controller': self._add_controller,
      'visual_scene': self._add_scene,
    }
    work = [(stage, el) for library, entry, stage in _LIBRARIES
            for el in self._entries(root, library, entry)]
    self.progress.begin(len(work))
    self.asset = Asset.parse(root)
    for stage, el in work:
      self.progress.update(f"{stage} {el.get('id') or ''}")
      self._decode(stage, el, handlers[stage])
    self.progress.end()
    return self

  @classmethod
  def parse(cls, root, config=None):
    if isinstance(root, ET.ElementTree):
      root = root.getroot()
    return cls(config).parse_document(root)

  @classmethod
  def load(cls, path, config=None):
    return cls.parse(ET.parse(path), config)

  @classmethod
  def loads(cls, text, config=None):
    return cls.parse(ET.fromstring(text), config)

  def print_document(self):
    print(f"Asset: unit={self.asset.unit_meter} up={self.asset.up_axis}")
    print("Geometries")
    for gid, mesh in self.geometries.items():
      print(f"  {gid}: {len(mesh.vertices)} vertices, {len(mesh.shapes)} shapes")
    print("Animations")
    for aid, anim in self.animations.items():
      print(f"  {aid}: " + ", ".join(f"{s.target} ({len(s)} keys)" for s in anim.sub_animations))
    print("Controllers")
    for sid, skin in self.skins.items():
      print(f"  {sid}: mesh {skin.mesh_id}, {len(skin.joint_names)} joints")
    print("Scenes")
    for scene in self.scenes:
      print(f"  {scene.id}: {len(scene.nodes)} root nodes, {len(scene.skeletons())} skeletons")
