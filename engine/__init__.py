"""
engine/
-------
Recording, playback & presentation layer.

    from engine import Session, SessionStore, Recorder
"""

from engine.config   import CONFIG, VisualizerConfig
from engine.scheduler import Scheduler, Timer, Tween
from engine.playback import Phase, PlaybackController, NullMotion
from engine.camera   import CameraRig, TreeLayout
from engine.motion   import ArrayMotion, SweepMotion
from engine.recorder import Recorder, RunMetrics
from engine.session  import Session, SessionStore

__all__ = [
    "CONFIG",
    "VisualizerConfig",
    "Scheduler",
    "Timer",
    "Tween",
    "Phase",
    "PlaybackController",
    "NullMotion",
    "CameraRig",
    "TreeLayout",
    "ArrayMotion",
    "SweepMotion",
    "Recorder",
    "RunMetrics",
    "Session",
    "SessionStore",
]
