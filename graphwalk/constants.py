"""
Shared constants for the canvas, hit-testing and camera.

These values are used by both the interaction layer (hit-testing, zoom steps)
and the renderer (node radius, grid). Keep them in sync!
"""

# Radius in world units for a node click to register
HIT_RADIUS = 35

# Radius in world units of the drawn node circle
NODE_RADIUS = 24

# Camera scale limits
MIN_SCALE = 0.2
MAX_SCALE = 5.0

# Scale delta applied per wheel notch and per toolbar zoom button press
WHEEL_ZOOM_STEP = 0.1
BUTTON_ZOOM_STEP = 0.3

# Background grid spacing in world units
GRID_STEP = 50

# Labels longer than this are truncated when drawn
LABEL_MAX_CHARS = 10

# Time accumulator units per second (0.05 per frame at 60 FPS)
TIME_RATE = 3.0
