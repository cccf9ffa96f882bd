import math


# Engine Timing Constants
MAX_TICK_DT = 0.05  # seconds, upper clamp on a single tick to bound integration error
DEFAULT_TICK_DT = 1.0 / 60.0  # seconds, fixed step used by headless drivers
FRICTION_REFERENCE_FPS = 60.0  # friction constants are tuned per 1/60 s frame

# Logging Constants
DEFAULT_LOG_LEVEL = "INFO"  # Default logging level
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"  # Default log format

# =============================================================================
# MAP & SPAWN CONSTANTS
# =============================================================================

MAP_BORDER_MARGIN = 40.0  # units kept clear between any entity and the map edge
OBSTACLE_COUNT = 110
OBSTACLE_SPAWN_INSET = 100.0  # units from the map edge
OBSTACLE_MIN_RADIUS = 14.0
OBSTACLE_MAX_RADIUS = 34.0
OBSTACLE_HUE_BASE = 170  # degrees
OBSTACLE_HUE_STEP = 17  # degrees per obstacle index
OBSTACLE_HUE_RANGE = 130  # degrees

TRAFFIC_COUNT = 34
TRAFFIC_SPAWN_INSET = 80.0
TRAFFIC_INITIAL_SPEED = 80.0  # max initial velocity component
TRAFFIC_TRUCK_EVERY = 5  # every Nth traffic vehicle is a truck
TRAFFIC_INITIAL_TIMER_MIN = 1.0  # seconds
TRAFFIC_INITIAL_TIMER_MAX = 5.0
TRAFFIC_LANE_TIMER_MIN = 1.2  # seconds between lane changes
TRAFFIC_LANE_TIMER_MAX = 4.8

PICKUP_COUNT = 65
PICKUP_SPAWN_INSET = 120.0
PICKUP_PHASE_RATE = 2.0  # radians per second of animation while active

AGENT_EXTRA_AT_START = 2  # agents spawned on top of mode.chaser_count
AGENT_SPAWN_ANGLE_STEP = 1.1  # radians per spawn seed
AGENT_SPAWN_BASE_DISTANCE = 200.0  # units from the spawn anchor
AGENT_SPAWN_DISTANCE_STEP = 20.0  # extra units per spawn seed
AGENT_HEAVY_EVERY = 5  # seed % 5 == 0 -> heavy
AGENT_INTERCEPTOR_EVERY = 7  # seed % 7 == 0 -> interceptor

# =============================================================================
# PLAYER PHYSICS CONSTANTS
# =============================================================================

BRAKE_TURN_MULTIPLIER = 1.32  # steering authority while braking
ANGULAR_DAMPING = 0.92  # per tick
ANGULAR_DAMPING_BRAKING = 0.82  # per tick
BOOST_THRUST = 250.0  # units/s² added along heading
BOOST_DRAIN_RATE = 21.0  # meter points per second
BOOST_REGEN_RATE = 8.0  # meter points per second
PULSE_REGEN_RATE = 7.0  # meter points per second
BOOST_SPEED_BONUS = 90.0  # units/s added on top of mode.max_speed

METER_MAX = 100.0  # boost and pulse charge ceiling
METER_MIN = 0.0
SHIELD_MAX = 7.0  # seconds, ceiling for shield pickups
PLAYER_START_BOOST = 100.0
PLAYER_START_PULSE = 100.0

# =============================================================================
# PURSUIT STEERING CONSTANTS
# =============================================================================

MIN_DISTANCE = 1.0  # floor for every distance used as a denominator
PRESSURE_DISTANCE_GAIN = 420.0  # K in K / distance
PRESSURE_DISTANCE_CAP = 3.4  # cap on the inverse-distance term
PRESSURE_HEAT_COEFFICIENT = 0.018  # per heat point
HEAT_SPEED_BONUS = 2.0  # agent top speed units/s per heat point
STUN_VELOCITY_DECAY = 0.92  # per tick while stunned

HEAVY_ACCEL_BIAS = 0.82
HEAVY_SPEED_OFFSET = -25.0
INTERCEPTOR_ACCEL_BIAS = 1.15
INTERCEPTOR_SPEED_OFFSET = 30.0
STANDARD_ACCEL_BIAS = 1.0
STANDARD_SPEED_OFFSET = 0.0

# =============================================================================
# COLLISION CONSTANTS
# =============================================================================

PLAYER_RADIUS = 16.0  # added to obstacle radius for contact
OBSTACLE_BUMP_IMPULSE = 80.0  # units/s along the contact normal
OBSTACLE_COMBO_PENALTY = 2.0
OBSTACLE_SCORE_PENALTY = 170.0
OBSTACLE_SHAKE = 8.0

HAZARD_CONTACT_MARGIN = 10.0  # added to hazard radius
HAZARD_VELOCITY_DAMPING = 0.96  # per tick while inside
HAZARD_SCORE_BLEED = 45.0  # score per second while inside
HAZARD_COMBO_BLEED = 0.5  # combo per second while inside

PICKUP_RADIUS = 32.0
PICKUP_BOOST_AMOUNT = 35.0
PICKUP_BOOST_SCORE = 240.0
PICKUP_SCORE_AMOUNT = 700.0
PICKUP_SCORE_COMBO = 1.0
PICKUP_SHIELD_AMOUNT = 2.5  # seconds
PICKUP_PULSE_AMOUNT = 38.0

TRAFFIC_CAR_CONTACT_RADIUS = 32.0
TRAFFIC_TRUCK_CONTACT_RADIUS = 38.0
TRAFFIC_CAR_SPEED_MIN = 65.0
TRAFFIC_CAR_SPEED_MAX = 110.0
TRAFFIC_TRUCK_SPEED_MIN = 38.0
TRAFFIC_TRUCK_SPEED_MAX = 66.0
TRAFFIC_SHIELD_COST = 0.8  # seconds of shield consumed per contact tick
TRAFFIC_SHIELD_SCORE = 80.0
TRAFFIC_VELOCITY_DAMPING = 0.78
TRAFFIC_COMBO_PENALTY = 1.2
TRAFFIC_SCORE_PENALTY = 120.0
TRAFFIC_SHAKE = 5.0

AGENT_CONTACT_RADIUS = 46.0
AGENT_SHIELD_COST = 1.5  # seconds
AGENT_SHIELD_REPEL = -0.5  # agent velocity multiplier on a blocked hit
AGENT_SHIELD_SCORE = 100.0

RESPAWN_SHIELD = 2.5  # seconds of shield after losing a life
RESPAWN_PULSE_BONUS = 30.0
RESPAWN_SHAKE = 12.0

NEAR_MISS_DISTANCE = 65.0  # units
NEAR_MISS_SPEED = 140.0  # units/s
NEAR_MISS_COOLDOWN = 0.35  # seconds, shared by traffic and agents
NEAR_MISS_COMBO = 0.6
NEAR_MISS_SCORE = 85.0

MAX_COLLISION_HISTORY = 32  # recent collision events kept for inspection

# =============================================================================
# ECONOMY CONSTANTS
# =============================================================================

HEAT_MIN = 0.0
HEAT_MAX = 100.0
COMBO_MIN = 1.0
COMBO_MAX = 20.0
SCORE_MIN = 0.0

PRESSURE_RANGE = 300.0  # units, agents further away add no pressure
PRESSURE_PER_UNIT = 0.0055  # pressure per unit inside the range
HEAT_GAIN = 7.0
HEAT_DECAY = 0.72  # heat points per second

COMBO_PRESSURE_GAIN = 0.62
COMBO_SPEED_THRESHOLD = 220.0  # units/s
COMBO_SPEED_CEILING = 18.0  # speed alone never pushes combo past this
COMBO_SPEED_GAIN = 0.4  # combo per second at high speed

SCORE_BASE_RATE = 24.0  # points per second
SCORE_SPEED_COEFFICIENT = 0.024
SCORE_HEAT_COEFFICIENT = 0.012

# =============================================================================
# PROGRESSION CONSTANTS
# =============================================================================

INITIAL_SURVIVE_TIME = 25.0  # seconds
SURVIVE_BONUS = 1200.0
SURVIVE_TO_COLLECT_PROBABILITY = 0.55
COLLECT_PICKUP_COUNT = 6
COLLECT_BONUS = 1700.0
COLLECT_FOLLOW_SURVIVE_TIME = 34.0
REACH_HEAT_TARGET = 55.0
REACH_HEAT_BONUS = 2200.0
REACH_HEAT_FOLLOW_SURVIVE_TIME = 36.0

INITIAL_WAVE = 1
INITIAL_NEXT_WAVE_HEAT = 20.0
WAVE_HEAT_STEP = 15.0
WAVE_HEAT_CEILING = 95.0
WAVE_BASE_REINFORCEMENTS = 2
WAVE_REINFORCEMENT_DIVISOR = 3
HAZARD_BURST_WAVE_INTERVAL = 2  # even waves trigger a burst

HAZARD_BURST_SIZE = 5
HAZARD_BURST_SPREAD = 260.0  # units around the player
HAZARD_MIN_RADIUS = 30.0
HAZARD_MAX_RADIUS = 90.0
HAZARD_MIN_TTL = 4.5  # seconds
HAZARD_MAX_TTL = 8.5
STORM_BURST_RATE = 0.3  # expected bursts per second in lightning weather

# =============================================================================
# ENERGY PULSE CONSTANTS
# =============================================================================

PULSE_COST = 24.0
PULSE_RADIUS = 260.0
PULSE_STUN_TIME = 1.8  # seconds
PULSE_VELOCITY_FACTOR = -0.4
PULSE_SCORE_PER_AGENT = 90.0
PULSE_FLASH = 0.65
PULSE_SHAKE = 14.0

# =============================================================================
# MESSAGE & COSMETIC CONSTANTS
# =============================================================================

DEFAULT_MESSAGE_DURATION = 2.5  # seconds
MAX_EVENT_MESSAGES = 64  # undrained messages kept, oldest dropped first
PAUSE_MESSAGE_DURATION = 1.2
IDLE_MESSAGE = "Stay alive. Pressure is rising."
FLASH_DECAY_RATE = 1.4  # per second
SHAKE_DECAY_PER_TICK = 0.4
LIGHTNING_FLASH_CHANCE = 0.003  # per tick in lightning weather
LIGHTNING_FLASH = 0.45
BEST_SCORE_KEY_PREFIX = "pursuit-best"
DEFAULT_DIFFICULTY_ID = "driver"
DEFAULT_WEATHER_ID = "clear"

# =============================================================================
# GYM ENVIRONMENT CONSTANTS
# =============================================================================

ENV_TIME_LIMIT = 180.0  # seconds of simulated time before truncation
ENV_NEAREST_AGENTS = 3  # agents described in each observation
ENV_REWARD_SCORE_SCALE = 0.01  # reward per score point
ENV_LIFE_LOST_PENALTY = 5.0
NORM_MAX_SPEED = 600.0  # units/s
NORM_MAX_DISTANCE = 1200.0  # units
NORM_MAX_SHIELD = SHIELD_MAX
ENV_OBSERVATION_SIZE = 15 + 2 * ENV_NEAREST_AGENTS

# =============================================================================
# RENDERING CONSTANTS
# =============================================================================

DEFAULT_WINDOW_WIDTH = 1280
DEFAULT_WINDOW_HEIGHT = 800
DEFAULT_WINDOW_SIZE = (DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)
DEFAULT_RENDER_FPS = 60
WINDOW_CAPTION = "Neon Pursuit"
WORLD_TO_SCREEN_SCALE = 0.82  # pixels per world unit in follow view
CAMERA_MODE_TOGGLE_KEY = "c"
FPS_TEXT_MARGIN = 10
BACKGROUND_COLOR = (5, 8, 22)
MAP_BORDER_COLOR = (120, 90, 255)
PAUSE_OVERLAY_ALPHA = 140
FONT_SIZE = 22

PLAYER_COLOR = (87, 231, 255)
SHIELD_COLOR = (127, 215, 255)
STANDARD_AGENT_COLOR = (255, 79, 112)
HEAVY_AGENT_COLOR = (255, 133, 66)
INTERCEPTOR_AGENT_COLOR = (255, 159, 82)
STUNNED_AGENT_COLOR = (160, 160, 255)
CAR_TRAFFIC_COLOR = (214, 223, 239)
TRUCK_TRAFFIC_COLOR = (149, 167, 201)
HAZARD_COLOR = (255, 60, 60)
GRID_COLOR = (40, 52, 84)
HUD_TEXT_COLOR = (235, 240, 255)
FLASH_COLOR = (255, 255, 255)
PICKUP_COLORS = {
    "boost": (143, 255, 122),
    "score": (255, 217, 100),
    "shield": (127, 215, 255),
    "pulse_cell": (255, 141, 255),
}
PLAYER_DRAW_SIZE = 28
AGENT_DRAW_SIZE = 22
HEAVY_AGENT_DRAW_SIZE = 26
CAR_DRAW_SIZE = 18
TRUCK_DRAW_SIZE = 24
PICKUP_DRAW_SIZE = 12

MINIMAP_WIDTH = 190
MINIMAP_HEIGHT = 140
MINIMAP_MARGIN = 16
MINIMAP_BG_COLOR = (8, 12, 28)

# Weather effects, screen space
WEATHER_PARTICLE_STEP = 0.016  # seconds the rain advances per frame
WEATHER_PARTICLE_MIN_VX = -20.0  # pixels/s
WEATHER_PARTICLE_MAX_VX = 20.0
WEATHER_PARTICLE_MIN_VY = 70.0
WEATHER_PARTICLE_MAX_VY = 260.0
WEATHER_PARTICLE_MIN_SIZE = 1.0  # pixels, streaks are four times as long
WEATHER_PARTICLE_MAX_SIZE = 3.0
WEATHER_PARTICLE_EDGE = 10.0  # pixels past the window before wrapping
WEATHER_PARTICLE_REENTRY_Y = -20.0
WEATHER_PARTICLE_ALPHA = 143
RAIN_PARTICLE_COLOR = (183, 219, 255)
FOG_PARTICLE_COLOR = (228, 235, 255)
CONTACT_MARKER_TIME = 0.6  # seconds a contact ring stays on screen
CONTACT_MARKER_RADIUS = 30.0  # world units

TWO_PI = 2 * math.pi

# Camera Constants
CAMERA_MODE_FOLLOW = "follow"
CAMERA_MODE_MAP_VIEW = "map_view"
CAMERA_MARGIN_FACTOR = 0.05  # 5% margin around the map in map view
MIN_ZOOM_FACTOR = 0.05  # pixels per world unit
MAX_ZOOM_FACTOR = 4.0

# Runtime Files
RENDER_MODE_HUMAN = "human"
DEFAULT_GAME_DATA_FILE = "maps/game_data.json"
DEFAULT_SCORE_FILE = "best_scores.json"
