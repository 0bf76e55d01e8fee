import unittest
import numpy as np

from collada_scene.collada.collada_skin import VertexWeights, Skin, Controller, JointWeight
from collada_scene import (
  StructuralError, LiteralParseError, ConsistencyError, UnresolvedReferenceError,
)
from .dae import el, skin, controller, IDENTITY


class TestVertexWeights(unittest.TestCase):

  def test_prefix_sum_offsets(self):
    vw = VertexWeights(3, 0, 1, np.array([2, 1, 3]), np.arange(12))
    self.assertEqual(list(vw.start_offsets()), [0, 4, 6])
    self.assertEqual(vw.get_nth_indices(1), [(4, 5)])
    self.assertEqual(vw.get_nth_indices(2), [(6, 7), (8, 9), (10, 11)])
    self.assertIsNone(vw.get_nth_indices(3))

  def test_swapped_slots(self):
    vw = VertexWeights(1, 1, 0, np.array([1]), np.array([7, 3]))
    self.assertEqual(vw.get_nth_indices(0), [(3, 7)])

  def test_slots_must_be_zero_and_one(self):
    self.assertRaises(ConsistencyError, VertexWeights, 1, 0, 0, np.array([1]), np.array([0, 0]))
    self.assertRaises(ConsistencyError, VertexWeights, 1, 0, 2, np.array([1]), np.array([0, 0]))

  def test_vcount_length(self):
    self.assertRaises(ConsistencyError, VertexWeights, 2, 0, 1, np.array([1]), np.array([0, 0]))

  def test_v_length(self):
    self.assertRaises(ConsistencyError, VertexWeights, 1, 0, 1, np.array([2]), np.array([0, 0, 1]))

  def test_parse_requires_both_inputs(self):
    xml = ('<vertex_weights count="1"><input semantic="JOINT" source="#j" offset="0"/>'
           '<vcount>1</vcount><v>0 0</v></vertex_weights>')
    self.assertRaises(StructuralError, VertexWeights.parse, el(xml))


class TestSkin(unittest.TestCase):

  def test_weights(self):
    s = Skin.parse(el(skin("c", vcount="1 2", v="0 0 1 1 0 1", weights="0.25 0.75")), "c")
    self.assertEqual(s.joint_names, ["Bone", "Bone_001"])
    self.assertEqual(s.vertex_weights[0], [JointWeight(0, 0.25)])
    self.assertEqual(s.vertex_weights[1], [JointWeight(1, 0.75), JointWeight(0, 0.75)])
    self.assertEqual(s.mesh_id, "Cube-mesh")
    self.assertEqual(len(s.bind_poses), 2)
    np.testing.assert_allclose(s.bind_shape_matrix, np.identity(4))

  def test_sources_by_id_suffix(self):
    s = Skin.parse(el(skin("c", vcount="1", v="1 0", joints_element=False)), "c")
    self.assertEqual(s.vertex_weights, [[JointWeight(1, 0.25)]])

  def test_weight_index_out_of_range(self):
    self.assertRaises(UnresolvedReferenceError, Skin.parse,
                      el(skin("c", vcount="1", v="0 5")), "c")

  def test_empty_weight_records(self):
    xml = skin("c", vcount="1", v="0 0").replace(
      'count="2" stride="1"><param name="WEIGHT"', 'count="2" stride="0"><param name="WEIGHT"')
    self.assertRaises(UnresolvedReferenceError, Skin.parse, el(xml), "c")

  def test_joint_index_out_of_range(self):
    self.assertRaises(UnresolvedReferenceError, Skin.parse,
                      el(skin("c", vcount="1", v="2 0")), "c")

  def test_bad_bind_shape_matrix(self):
    bad = " ".join(IDENTITY.split()[:15])
    self.assertRaises(LiteralParseError, Skin.parse, el(skin("c", bind_shape=bad)), "c")

  def test_missing_vertex_weights(self):
    xml = skin("c").split('<vertex_weights')[0] + '</skin>'
    self.assertRaises(StructuralError, Skin.parse, el(xml), "c")

  def test_unknown_weight_source(self):
    xml = skin("c").replace('source="#c-weights" offset', 'source="#other" offset')
    self.assertRaises(UnresolvedReferenceError, Skin.parse, el(xml), "c")

  def test_controller(self):
    ctrl = Controller.parse(el(controller("Armature_Cube-skin")))
    self.assertEqual(ctrl.id, "Armature_Cube-skin")
    self.assertEqual(ctrl.mesh_id, "Cube-mesh")
    self.assertEqual(len(ctrl.skin.vertex_weights), 4)

  def test_controller_two_skins(self):
    xml = '<controller id="c">' + skin("c") + skin("c") + '</controller>'
    self.assertRaises(StructuralError, Controller.parse, el(xml))


if __name__ == '__main__':
  unittest.main()
