"""
Game configuration constants.

Everything tunable about the game lives here so the engine and the
pygame front-end agree on geometry, limits and storage keys.
"""

import os

# =============================================================================
# WINDOW / FIELD
# =============================================================================

WINDOW_WIDTH = 800
WINDOW_HEIGHT = 640
HUD_HEIGHT = 60

# The play field sits below the HUD and fills the rest of the window
FIELD_WIDTH = WINDOW_WIDTH
FIELD_HEIGHT = WINDOW_HEIGHT - HUD_HEIGHT

FPS = 60

# =============================================================================
# BUBBLES
# =============================================================================

BUBBLE_DIAMETER = 80.0
PLACEMENT_ATTEMPTS = 50
COMBO_MULTIPLIER = 1.5

# =============================================================================
# ROUND / SETTINGS
# =============================================================================

DEFAULT_GAME_DURATION = 60
DEFAULT_MAX_BUBBLES = 15
GAME_DURATION_RANGE = (1, 60)
MAX_BUBBLES_RANGE = (0, 15)

COUNTDOWN_SECONDS = 3
TICK_INTERVAL_MS = 1000

# =============================================================================
# LEADERBOARD / PERSISTENCE
# =============================================================================

MAX_HIGH_SCORES = 10
SETTINGS_KEY = "gameSettings"
HIGH_SCORES_KEY = "highScores"

DATA_DIR = os.environ.get("BUBBLE_POP_DATA_DIR") or os.path.join(
    os.path.expanduser("~"), ".bubble_pop"
)
LOG_LEVEL = os.environ.get("BUBBLE_POP_LOG_LEVEL", "INFO")

# =============================================================================
# COLORS (RGB)
# =============================================================================

BUBBLE_RGB = {
    "red": (220, 50, 50),
    "pink": (240, 110, 180),
    "green": (50, 180, 50),
    "blue": (50, 100, 220),
    "black": (25, 25, 30),
}

BG_TOP_COLOR = (26, 51, 115)
BG_BOTTOM_COLOR = (77, 102, 230)
HUD_COLOR = (20, 30, 70)
PANEL_COLOR = (40, 48, 90)
TEXT_COLOR = (240, 240, 240)
ACCENT_COLOR = (230, 128, 25)
BEST_COLOR = (250, 215, 80)
COMBO_COLOR = (170, 90, 220)
BUTTON_COLOR = (70, 110, 200)
BUTTON_HOVER_COLOR = (90, 135, 230)
BUTTON_DISABLED_COLOR = (90, 95, 115)
INPUT_BG_COLOR = (60, 75, 140)

# Score popup animation
POPUP_DURATION = 1500  # milliseconds
POPUP_RISE = 50  # pixels
