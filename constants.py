# Constants for the IPMA District Safety service

# Verdict reasons
REASON_NOT_APPLICABLE = "Not applicable"
REASON_NO_WARNINGS_FOR_AREA = "No active warnings for this area"
REASON_NO_ACTIVE_WARNINGS = "No active warnings"

# District name used when a fix falls outside every bounding box
UNKNOWN_DISTRICT = "Unknown"

# Warnings feed field names
FIELD_AREA_ID = "idAreaAviso"
FIELD_START_TIME = "startTime"
FIELD_END_TIME = "endTime"
FIELD_LEVEL = "awarenessLevelID"
FIELD_DESCRIPTION = "awarenessTypeName"

# Timestamp format used by the IPMA feeds
IPMA_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Status messages
STATUS_INITIALIZING = "Initializing app..."
STATUS_READY = "Ready - Tap Simulate or Start GPS. \nMake sure GPS is always on!"
STATUS_INITIAL_FETCH_FAILED = "Warning: Could not fetch initial data"
STATUS_FETCHING_WARNINGS = "Fetching warning data..."
STATUS_WARNINGS_UPDATED = "Warning data updated"
STATUS_WARNINGS_NETWORK_ERROR = "Network error getting warning data"
STATUS_INVALID_JSON = "Invalid JSON response"
STATUS_FETCHING_FORECAST = "Fetching safety data..."
STATUS_FORECAST_UPDATED = "Safety data updated"
STATUS_FORECAST_NETWORK_ERROR = "Network error getting safety data"
STATUS_NO_FORECAST_DATA = "No safety data available"
STATUS_REFRESHING = "Refreshing all safety data..."
STATUS_REFRESHED = "All safety data updated"
STATUS_REFRESH_FAILED = "Failed to update safety data"
STATUS_GPS_UPDATED = "GPS Location Updated"
STATUS_GPS_STARTING = "Starting GPS tracking..."
STATUS_GPS_ACTIVE = "GPS tracking active"
STATUS_GPS_STOPPED = "GPS tracking stopped"
STATUS_GPS_UNSUPPORTED = "GPS not supported on this platform"
STATUS_LOCATION_ERROR = "Location error: {message}"
STATUS_SIMULATING = "Simulating: {name}"

# Alert dialogs
ALERT_GPS_ERROR_TITLE = "GPS Location Error"
ALERT_PLATFORM_TITLE = "Platform Limitation"
ALERT_PLATFORM_MESSAGE = "Location events are not supported on this platform."

# Safety banner text
SAFE_BANNER = "⭐ This district is SAFE! ⭐"
UNSAFE_BANNER = "⚠️ This district is UNSAFE! ⚠️"

# Predefined locations for simulation: name -> (lat, lon)
SIMULATED_LOCATIONS = {
    "Lisbon": (38.7223, -9.1393),
    "Porto": (41.1579, -8.6291),
    "Faro": (37.0193, -7.9304),
    "Braga": (41.5454, -8.4265),
    "Coimbra": (40.2033, -8.4103),
}

# Validation limits
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

# Error messages
ERROR_INVALID_COORDINATES = "Invalid coordinates"
ERROR_INVALID_AREA_ID = "Invalid warning area identifier"
ERROR_INVALID_FORECAST_AREA_ID = "Invalid forecast area identifier"
ERROR_DISTRICT_NOT_FOUND = "Coordinates are outside all known districts"
ERROR_NO_FIX = "No location fix available"

# Forecast table columns: IPMA daily field -> display column
FORECAST_COLUMNS = {
    "forecastDate": "Date",
    "tMax": "Max Temp (°C)",
    "tMin": "Min Temp (°C)",
    "precipitaProb": "Precipitation Chance (%)",
    "predWindDir": "Wind Direction",
    "classWindSpeed": "Wind Speed Class",
    "idWeatherType": "Weather Type",
}

# Map link for the last fix
MAP_URL_TEMPLATE = "https://maps.google.com/maps?q=Portugal+Safety+Mapper@{lat},{lon}"
ALERT_NO_LOCATION_TITLE = "No Location"
ALERT_NO_LOCATION_MESSAGE = "Please get a location first using GPS or simulation."
