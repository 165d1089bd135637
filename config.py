"""Server-wide configuration constants for Emberhymn Server."""

import os

# Level layout
LEVEL_WIDTH = 40            # Grid width in tiles
LEVEL_HEIGHT = 40           # Grid height in tiles
MIN_ROOMS = 8
MAX_ROOMS = 12
MIN_ROOM_SIZE = 4
MAX_ROOM_SIZE = 9
MAX_EXTRA_ROOM_ATTEMPTS = 200   # Retries when fewer than 2 rooms fit

# Population
MIN_ENEMIES_PER_ROOM = 1
MAX_ENEMIES_PER_ROOM = 2
ELITE_CHANCE = 0.2
CHEST_CHANCE = 0.3

# Player
PLAYER_NAME = "Bearer"
INITIAL_PLAYER_STATS = {
    "hp": 100,
    "max_hp": 100,
    "stamina": 100,
    "max_stamina": 100,
    "ember": 0,
    "max_ember": 100,
    "strength": 10,
}

# Combat
EMBER_GAIN_ON_HIT = 5
KILL_HEAL = 5
EMBER_BURST_COST = 50
EMBER_BURST_DAMAGE = 50
EMBER_BURST_RADIUS = 2      # Manhattan distance
STAMINA_REGEN = 1
CHEST_MAX_HP_BONUS = 10
CHEST_STRENGTH_BONUS = 2

# Enemy AI
AI_SIGHT_RANGE = 8.0        # Euclidean tiles; beyond this enemies idle
AI_ATTACK_RANGE = 1.5       # Euclidean tiles; below this enemies attack

# Exploration
DISCOVERY_RADIUS = 2        # 5x5 block around the player

# Session
LOG_LIMIT = 20

# Timers
AI_TICK_SECONDS = float(os.environ.get("EMBERHYMN_AI_TICK_SECONDS", "0.8"))
REGEN_TICK_SECONDS = float(os.environ.get("EMBERHYMN_REGEN_TICK_SECONDS", "0.1"))

# Runtime
RNG_SEED = os.environ.get("EMBERHYMN_SEED")  # Unset for unseeded play
LOG_LEVEL = os.environ.get("EMBERHYMN_LOG_LEVEL", "INFO").upper()
