from __future__ import annotations

# ==============================================================================
# Field
# ==============================================================================

FIELD_WIDTH = 800.0
FIELD_HEIGHT = 600.0

# ==============================================================================
# Projectiles
# ==============================================================================

# Interceptor speed, faster than the fastest rocket of any tier.
MISSILE_SPEED = 600.0

# Distance below which a projectile counts as having reached its target point.
ROCKET_ARRIVAL_EPS = 2.0
MISSILE_ARRIVAL_EPS = 5.0

# ==============================================================================
# Explosions
# ==============================================================================

EXPLOSION_GROWTH_RATE = 120.0  # units / s
MISSILE_BLAST_RADIUS = 50.0
IMPACT_BLAST_RADIUS = 40.0  # ground hit, nothing destroyed
IMPACT_DESTROY_BLAST_RADIUS = 80.0  # ground hit that destroyed an asset
SHIELD_BLAST_RADIUS = 60.0
SHIELD_BLAST_OFFSET_Y = -20.0  # deflection flash sits above the battery

# ==============================================================================
# Ground Assets
# ==============================================================================

CITY_COUNT = 6
BATTERY_COUNT = 3
CITY_GROUND_OFFSET = 50.0  # city y = field height - offset
BATTERY_GROUND_OFFSET = 60.0

# Half-extents of the axis-aligned hit boxes used for impacts and clicks.
CITY_HIT_RADIUS = 20.0
BATTERY_HIT_RADIUS = 25.0

# Time to fill a progress bar from 0 to 1.
CITY_REPAIR_SECONDS = 10.0
BATTERY_REPAIR_SECONDS = 20.0
SHIELD_CHARGE_SECONDS = 5.0

# Resting barrel angle (pointing straight up in screen space).
BATTERY_REST_ANGLE = -1.5707963267948966

# ==============================================================================
# Scoring
# ==============================================================================

SCORE_PER_ROCKET = 20
WIN_SCORE = 1000
# Manual kills needed to award one tracking missile per surviving battery.
TRACKING_BONUS_KILLS = 10

# ==============================================================================
# Smoke
# ==============================================================================

SMOKE_BURST_COUNT = 5
SMOKE_SPREAD_X = 20.0
SMOKE_SPREAD_Y = 10.0
SMOKE_OPACITY_MIN = 0.4
SMOKE_OPACITY_MAX = 0.7
SMOKE_SIZE_MIN = 10.0
SMOKE_SIZE_MAX = 25.0
SMOKE_RISE_RATE = 5.0
SMOKE_JITTER = 2.0
SMOKE_FADE_RATE = 0.05

# ==============================================================================
# Rating
# ==============================================================================

# (minimum intact assets, letter), checked top to bottom. S is the full default
# layout of 9; layouts with more assets also rate S when 9 or more stand.
RATING_THRESHOLDS = ((9, "S"), (7, "A"), (5, "B"), (3, "C"), (1, "D"))
RATING_FLOOR = "F"

LEADERBOARD_MAX_ENTRIES = 50
