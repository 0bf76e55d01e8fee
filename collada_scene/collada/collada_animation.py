# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np

from . import collada_util as U
from .collada_reader import DataSource
from ..core.errors import StructuralError, ConsistencyError


@dataclass
class SubAnimation:
  target: str
  sample_times: List[float]
  transformations: List[np.ndarray]

  def __len__(self):
    return len(self.sample_times)

  def targets(self, path):
    return self.target == path or self.target.startswith(path + '/')

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'animation')
    aid = U.require_attr(el, 'id')
    channel = U.single_child(el, 'channel')
    target = U.require_attr(channel, 'target')

    sampler_inputs = {}
    sampler = U.single_child(el, 'sampler', required=False)
    if sampler is not None:
      for inp in U.children_named(sampler, 'input'):
        sampler_inputs[inp.get('semantic')] = U.strip_ref(inp.get('source'))
    input_id = sampler_inputs.get('INPUT') or aid + '-input'
    output_id = sampler_inputs.get('OUTPUT') or aid + '-output'

    times = None
    outputs = None
    for s in U.children_named(el, 'source'):
      sid = U.require_attr(s, 'id')
      if sid == input_id:
        times = DataSource.parse_source(s)
      elif sid == output_id:
        outputs = DataSource.parse_source(s)
    if times is None:
      raise StructuralError(f"no sample time source '{input_id}'", ref=aid)
    if outputs is None:
      raise StructuralError(f"no output source '{output_id}'", ref=aid)

    sample_times = [float(rec[0]) for rec in times.iterate()]
    transformations = [U.matrix_from_values(rec) for rec in outputs.iterate()]
    if len(sample_times) != len(transformations):
      raise ConsistencyError(
        f"{len(sample_times)} sample times for {len(transformations)} transforms", ref=aid)
    return cls(target, sample_times, transformations)


def _channel_holders(el):
  """<animation> elements, el included, that directly own a <channel>, in document order."""
  if U.children_named(el, 'channel'):
    yield el
  for child in U.children_named(el, 'animation'):
    yield from _channel_holders(child)


@dataclass
class Animation:
  id: str
  name: Optional[str] = None
  sub_animations: List[SubAnimation] = field(default_factory=list)

  def has_target(self, path):
    return any(sub.targets(path) for sub in self.sub_animations)

  def sub_animations_for(self, path):
    return [sub for sub in self.sub_animations if sub.targets(path)]

  @classmethod
  def parse(cls, el):
    U.expect_tag(el, 'animation')
    aid = U.require_attr(el, 'id')
    subs = [SubAnimation.parse(holder) for holder in _channel_holders(el)]
    if not subs:
      raise StructuralError("<animation> has no <channel>", ref=aid)
    return cls(aid, el.get('name'), subs)
