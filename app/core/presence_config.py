# --------------------------------------------------
# PRESENCE
# --------------------------------------------------

# Read side: how long after the last heartbeat a user still counts as online
ONLINE_WINDOW_SECONDS = 120

# Write side: cleanup sweep flips "online" users idle longer than this
STALE_AFTER_SECONDS = 60

# --------------------------------------------------
# LOCATION
# --------------------------------------------------

# How old a fix may be and still place a user on the map
LOCATION_WINDOW_SECONDS = 300

# Decimal places kept when persisting coordinates (~11 m)
COORDINATE_PRECISION = 4

# --------------------------------------------------
# NEARBY
# --------------------------------------------------

EARTH_RADIUS_KM = 6371.0

MAX_RADIUS_KM = 5.0

MAX_NEARBY_RESULTS = 50
