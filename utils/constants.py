import json
from config.paths import CONSTANTS_PATH

"""
Loads configuration constants from config/constants.json and exposes them as module-level variables.
Edit constants.json to change values; import from utils.constants to use in code.
"""

with open(CONSTANTS_PATH, "r", encoding="utf-8") as f:
    _constants = json.load(f)

# Half-day windows and overlap thresholds
HALF_DAY_WINDOWS = _constants["HALF_DAY_WINDOWS"]
AVAILABILITY_THRESHOLD_MINUTES = _constants["AVAILABILITY_THRESHOLD_MINUTES"]
DEMAND_THRESHOLD_MINUTES = _constants["DEMAND_THRESHOLD_MINUTES"]
WORKING_DAYS_PER_WEEK = _constants["WORKING_DAYS_PER_WEEK"]

# Assignment rewards
REWARD_SCALE = _constants["REWARD_SCALE"]
BASE_COVERAGE_REWARD = _constants["BASE_COVERAGE_REWARD"]
SITE_COVERAGE_TARGET = _constants["SITE_COVERAGE_TARGET"]
CATEGORY_CHANGE_PENALTY = _constants["CATEGORY_CHANGE_PENALTY"]
LINKED_ENTITY_BONUS = _constants["LINKED_ENTITY_BONUS"]
# preferred, secondary, tertiary site
SITE_PREFERENCE_REWARDS = tuple(_constants["SITE_PREFERENCE_REWARDS"])
RELUCTANT_SITES = tuple(_constants["RELUCTANT_SITES"])
RELUCTANT_SITE_PENALTY = _constants["RELUCTANT_SITE_PENALTY"]
CLOSURE_CONTINUITY_BONUS = _constants["CLOSURE_CONTINUITY_BONUS"]
ADMIN_BASE_REWARD = _constants["ADMIN_BASE_REWARD"]
ADMIN_PREFERENCE_BONUS = _constants["ADMIN_PREFERENCE_BONUS"]
ADMIN_REPEAT_PENALTY = _constants["ADMIN_REPEAT_PENALTY"]

# Operating-room roles
CORE_ROLE_REWARD = _constants["CORE_ROLE_REWARD"]
RECEPTION_ROLE_REWARD = _constants["RECEPTION_ROLE_REWARD"]
RECEPTION_ROLES = set(_constants["RECEPTION_ROLES"])
ROLE_CAPABILITIES = _constants["ROLE_CAPABILITIES"]

# Floater placement
FLOATER_FILL_REWARD = _constants["FLOATER_FILL_REWARD"]
FLOATER_PREFERRED_SITE_REWARD = _constants["FLOATER_PREFERRED_SITE_REWARD"]
FLOATER_DISPLACE_NON_PREFERRING_REWARD = _constants[
    "FLOATER_DISPLACE_NON_PREFERRING_REWARD"
]
FLOATER_DISPLACE_PREFERRING_PENALTY = _constants["FLOATER_DISPLACE_PREFERRING_PENALTY"]
FLOATER_OTHER_SITE_REWARD = _constants["FLOATER_OTHER_SITE_REWARD"]
FLOATER_DISPLACEMENT_PENALTY = _constants["FLOATER_DISPLACEMENT_PENALTY"]

# Rooms
ROOMS = _constants["ROOMS"]
MULTI_FLOW_SIZES = tuple(_constants["MULTI_FLOW_SIZES"])

# Closing responsibilities
PRIMARY_WEIGHT = _constants["PRIMARY_WEIGHT"]
SECONDARY_WEIGHT = _constants["SECONDARY_WEIGHT"]
TERTIARY_WEIGHT = _constants["TERTIARY_WEIGHT"]
MULTIPLE_CLOSER_SURCHARGE = _constants["MULTIPLE_CLOSER_SURCHARGE"]
OVERLOAD_SURCHARGE = _constants["OVERLOAD_SURCHARGE"]
FAIR_SCORE_CEILING = _constants["FAIR_SCORE_CEILING"]
MAX_EXCHANGE_ITERATIONS = _constants["MAX_EXCHANGE_ITERATIONS"]
TERTIARY_WEEKDAYS = tuple(_constants["TERTIARY_WEEKDAYS"])

# Solver
SOLVER_TIMEOUT_SECONDS = _constants["SOLVER_TIMEOUT_SECONDS"]
SOLVER_SEED = _constants["SOLVER_SEED"]
SOLVER_WORKERS = _constants["SOLVER_WORKERS"]
