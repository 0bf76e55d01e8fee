# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

PREFIX = "collada_scene"

class ProgressHelper:
  def __init__(self, enabled=True):
    self.enabled = enabled
    self.total = 0
    self.cur = 0
    self.started = False

  def _print(self, msg):
    if self.enabled:
      print(msg)

  def begin(self, total, msg=f"{PREFIX}: decoding..."):
    self.total = max(1, int(total))
    self.cur = 0
    self.started = True
    self._print(msg)

  def update(self, msg=None, step=1):
    if not self.started:
      return
    self.cur = min(self.total, self.cur + max(1, int(step)))
    if msg:
      self._print(f"{PREFIX}: [{self.cur}/{self.total}] {msg}")

  def info(self, msg):
    self._print(f"INFO: {msg}")

  def end(self, msg_done=f"{PREFIX}: done"):
    if not self.started:
      return
    self.cur = self.total
    self._print(msg_done)
    self.started = False
