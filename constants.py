# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are the defaults the configuration file falls back to, plus the
rendering properties that are not part of the experimental configuration.
"""

# --- Logical Domain ---
# All simulation state lives in [-DOMAIN_HALF_EXTENT, DOMAIN_HALF_EXTENT]
# on both axes, independent of the window resolution.
DOMAIN_HALF_EXTENT = 100.0
# Per-axis distance at or below which two particles reverse direction.
PROXIMITY_THRESHOLD = 2.5
INITIAL_VELOCITY = (1.5, 1.5)
DEFAULT_PARTICLE_COUNT = 100
# Wall-clock seconds between simulation steps.
TICK_INTERVAL = 0.1

# --- Initial Layouts ---
LAYOUTS = ("random", "ring")
DEFAULT_LAYOUT = "random"
# The ring layout rotates (RING_OFFSET, RING_OFFSET) around the origin.
RING_OFFSET = 30.0

# Visualization settings
WINDOW_WIDTH = 1024
WINDOW_HEIGHT = 1024
FPS = 60
BACKGROUND_COLOR = (100, 149, 237) # Cornflower Blue
DEFAULT_PARTICLE_RADIUS = 6.0
# Used when a particle has no color of its own.
FALLBACK_PARTICLE_COLOR = (255, 0, 0)

# --- Palette Generation ---
# Saturation and value ranges (percent) for randomly generated hues.
PALETTE_SATURATION_RANGE = (55.0, 100.0)
PALETTE_VALUE_RANGE = (70.0, 100.0)

# A curated list of vibrant colors, used to pad or replace a color list
# from the config file that is too short or cannot be parsed.
VIBRANT_COLORS = [
    (255, 0, 102),   # Hot Pink
    (0, 255, 255),   # Cyan
    (255, 204, 0),   # Gold
    (0, 255, 102),   # Bright Green
    (204, 0, 255),   # Purple
    (255, 102, 0)    # Orange
]
