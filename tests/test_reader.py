import unittest
import numpy as np

from collada_scene.collada.collada_reader import Accessor, DataSource
from collada_scene import StructuralError, LiteralParseError
from .dae import el, source


class TestAccessor(unittest.TestCase):

  def test_get_nth_bounds(self):
    acc = Accessor(3, 3, ['X', 'Y', 'Z'])
    array = np.arange(10, dtype=np.float32)
    for n in range(6):
      rec = acc.get_nth(n, array)
      if (n + 1) * 3 <= len(array):
        self.assertEqual(len(rec), 3)
        self.assertEqual(list(rec), [3 * n, 3 * n + 1, 3 * n + 2])
      else:
        self.assertIsNone(rec)

  def test_zero_stride(self):
    acc = Accessor(3, 0, [])
    rec = acc.get_nth(0, np.arange(4))
    self.assertIsNotNone(rec)
    self.assertEqual(len(rec), 0)
    self.assertIsNone(acc.get_nth(-1, np.arange(4)))

  def test_parse(self):
    acc = Accessor.parse(el('<accessor count="2" stride="2"><param name="S"/><param name="T"/></accessor>'))
    self.assertEqual((acc.count, acc.stride, acc.params), (2, 2, ['S', 'T']))

  def test_unnamed_param_kept(self):
    acc = Accessor.parse(el('<accessor count="1" stride="2"><param type="float"/><param name="T"/></accessor>'))
    self.assertEqual(acc.params, ['', 'T'])

  def test_missing_stride(self):
    with self.assertRaises(StructuralError) as cm:
      Accessor.parse(el('<accessor count="2"/>'))
    self.assertEqual(cm.exception.attribute, 'stride')

  def test_bad_count(self):
    with self.assertRaises(StructuralError) as cm:
      Accessor.parse(el('<accessor count="two" stride="1"/>'))
    self.assertEqual(cm.exception.attribute, 'count')

  def test_wrong_tag(self):
    self.assertRaises(StructuralError, Accessor.parse, el('<param count="1" stride="1"/>'))


class TestDataSource(unittest.TestCase):

  def test_parse_and_iterate(self):
    ds = DataSource.parse_source(el(source("pos", "1 2 3 4 5 6", 3, "XYZ")))
    self.assertEqual(ds.id, "pos")
    self.assertEqual(ds.count, 2)
    first = [list(r) for r in ds.iterate()]
    second = [list(r) for r in ds.iterate()]
    self.assertEqual(first, [[1, 2, 3], [4, 5, 6]])
    self.assertEqual(first, second)

  def test_zero_stride_iterates_nothing(self):
    ds = DataSource.parse_source(el(source("s", "1 2 3", 0, [], count=3)))
    self.assertEqual(list(ds.iterate()), [])

  def test_project(self):
    ds = DataSource.parse_source(el(source("uv", "0 1 2 3", 2, "ST")))
    np.testing.assert_allclose(ds.project(('T', 'S')), [[1, 0], [3, 2]])
    self.assertIsNone(ds.project(('X',)))

  def test_names(self):
    ds = DataSource.parse_source(el(source("j", "Hip Knee", 1, ["JOINT"], array='Name_array')), 'Name_array')
    self.assertEqual([r[0] for r in ds], ['Hip', 'Knee'])

  def test_bad_token(self):
    self.assertRaises(LiteralParseError, DataSource.parse_source, el(source("pos", "1 2 x", 3, "XYZ")))

  def test_duplicate_array(self):
    xml = ('<source id="s"><float_array>1</float_array><float_array>2</float_array>'
           '<technique_common><accessor count="1" stride="1"/></technique_common></source>')
    self.assertRaises(StructuralError, DataSource.parse_source, el(xml))

  def test_missing_technique(self):
    self.assertRaises(StructuralError, DataSource.parse_source,
                      el('<source id="s"><float_array>1</float_array></source>'))

  def test_missing_array(self):
    xml = '<source id="s"><technique_common><accessor count="1" stride="1"/></technique_common></source>'
    self.assertRaises(StructuralError, DataSource.parse_source, el(xml))

  def test_missing_id(self):
    xml = ('<source><float_array>1</float_array>'
           '<technique_common><accessor count="1" stride="1"/></technique_common></source>')
    with self.assertRaises(StructuralError) as cm:
      DataSource.parse_source(el(xml))
    self.assertEqual(cm.exception.attribute, 'id')


if __name__ == '__main__':
  unittest.main()
