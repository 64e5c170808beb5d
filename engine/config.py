"""
config.py — Visualizer Configuration
=====================================
Every tunable number of the playback, camera and motion layers in one
place.  Class attributes, one shared instance:

    from engine.config import CONFIG
    delay = CONFIG.delay_numerator / speed
"""

from typing import Dict, Tuple


class VisualizerConfig:
    # playback
    speed_min:        int   = 1
    speed_max:        int   = 10
    speed_default:    int   = 5
    delay_numerator:  float = 1200.0     # inter-step delay (ms) = delay_numerator / speed
    frame_ms:         float = 1000.0 / 60.0

    # tree layout
    node_w:  float = 120.0
    node_h:  float = 52.0
    h_gap:   float = 24.0
    v_gap:   float = 56.0

    # camera
    camera_lerp:         float = 0.15     # per frame
    camera_snap_xy:      float = 0.5
    camera_snap_scale:   float = 0.001
    camera_fit_pad:      float = 50.0
    camera_fit_max:      float = 1.5
    camera_focus_base:   float = 0.9
    camera_focus_step:   float = 0.15     # extra zoom per depth level
    camera_focus_max:    float = 1.8
    zoom_in_factor:      float = 1.1
    zoom_out_factor:     float = 0.9
    zoom_min:            float = 0.2
    zoom_max:            float = 3.0

    # bar layout
    bar_pad:        float = 50.0
    bar_gap:        float = 6.0
    bar_min_width:  float = 22.0
    bar_max_width:  float = 56.0

    # motion durations (ms), each divided by speed and floored
    bar_motion_ms:     float = 600.0
    bar_motion_min:    float = 200.0
    mote_motion_ms:    float = 400.0
    mote_motion_min:   float = 150.0
    mote_trail:        int   = 12
    sweep_ms_per_px:   float = 2.5
    sweep_max_ms:      float = 400.0
    sweep_snap_px:     float = 1.0

    # default surface when the client has not reported one yet
    viewport: Tuple[int, int] = (900, 600)

    # session store: idle sessions are evicted, and the store never holds more than max_sessions
    session_idle_s:  float = 30 * 60.0
    max_sessions:    int   = 256

    # input limits
    limits: Dict[str, Tuple[int, int]] = {
        "quickselect": (2, 20),
        "radix_sort":  (2, 20),
        "operand_digits": (1, 8),
    }

    def delay_ms(self, speed: int) -> float:
        return self.delay_numerator / speed

    def clamp_speed(self, speed: int) -> int:
        return max(self.speed_min, min(self.speed_max, int(speed)))


CONFIG = VisualizerConfig()
