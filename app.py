from flask import Flask, request, jsonify
from flask_cors import CORS
import logging
import os

# Import configuration and services
from config import Config
from constants import (
    ERROR_INVALID_AREA_ID,
    ERROR_INVALID_FORECAST_AREA_ID,
    ERROR_NO_FIX,
    UNKNOWN_DISTRICT,
)
from exceptions import (
    DistrictNotFoundError,
    NoAreaIdError,
    SafetyServiceError,
    UnknownDistrictError,
    ValidationError,
)
from models import LocationFix
from services.monitor_service import SafetyMonitor
from services.weather_service import create_forecast_dataframe, forecast_records
import health
from utils.validation import (
    parse_coordinate,
    validate_area_id,
    validate_coordinates,
    validate_forecast_area_id,
    validate_location_error_payload,
    validate_location_payload,
)

# Configure logging
os.makedirs(
    os.path.dirname(Config.LOG_FILE) if os.path.dirname(Config.LOG_FILE) else ".",
    exist_ok=True,
)
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.FileHandler(Config.LOG_FILE), logging.StreamHandler()],
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config["SECRET_KEY"] = Config.SECRET_KEY
app.json.ensure_ascii = False

# Enable CORS with proper configuration
if Config.CORS_ORIGINS == ["*"]:
    logger.warning(
        "CORS is configured to allow all origins. This is not recommended for production."
    )
    CORS(app)
else:
    CORS(app, origins=Config.CORS_ORIGINS)

# One monitoring session per process
monitor = SafetyMonitor()


@app.before_request
def load_initial_warnings():
    """Fetch the warnings feed before the first request is answered"""
    monitor.ensure_initialized()


def status_response():
    """Current session snapshot plus any alerts raised since the last poll"""
    data = monitor.snapshot()
    pending = getattr(monitor.alert_presenter, "pending", None)
    data["alerts"] = pending() if pending else []
    return data


@app.errorhandler(SafetyServiceError)
def handle_service_error(error):
    logger.warning(f"{type(error).__name__}: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@app.route("/districts")
def list_districts():
    """Return every district in lookup order"""
    return jsonify(
        {
            "districts": [d.to_dict() for d in monitor.registry.all_districts()],
            "duplicate_warning_areas": monitor.registry.duplicate_codes(),
        }
    )


@app.route("/resolve")
def resolve_district():
    """
    Resolve coordinates to a district.

    Query args:
        lat: Latitude
        lon: Longitude

    Returns:
        JSON district record, or 404 when outside all districts
    """
    lat = request.args.get("lat")
    lon = request.args.get("lon")
    is_valid, error_msg = validate_coordinates(lat, lon)
    if not is_valid:
        logger.warning(f"Invalid coordinates in resolve request: {lat}, {lon}")
        raise ValidationError(error_msg)

    lat_value, lon_value = parse_coordinate(lat), parse_coordinate(lon)
    district = monitor.resolver.resolve(lat_value, lon_value)
    if district is None:
        raise DistrictNotFoundError(lat_value, lon_value)

    return jsonify({"district": district.to_dict()})


@app.route("/warnings/<area_id>")
def get_warnings(area_id):
    """Indexed warning records for a warning area"""
    if not validate_area_id(area_id):
        logger.warning(f"Invalid area id in warnings request: {area_id}")
        raise ValidationError(ERROR_INVALID_AREA_ID)

    records = monitor.store.lookup(area_id)
    return jsonify({"area_id": area_id, "warnings": [r.to_dict() for r in records]})


@app.route("/safety/<area_id>")
def get_safety(area_id):
    """Safety verdict for a warning area at the current instant"""
    if not validate_area_id(area_id):
        logger.warning(f"Invalid area id in safety request: {area_id}")
        raise ValidationError(ERROR_INVALID_AREA_ID)

    verdict = monitor.evaluator.evaluate(area_id, monitor.clock())
    districts = [d.name for d in monitor.registry.find_by_warning_area(area_id)]
    data = verdict.to_dict()
    data.update({"area_id": area_id, "districts": districts})
    return jsonify(data)


@app.route("/districts/<name>/safety")
def get_district_safety(name):
    """Safety verdict for a district looked up by name"""
    district = monitor.registry.get_by_name(name)
    if district is None:
        raise UnknownDistrictError(name)
    if not district.warning_area_id:
        raise NoAreaIdError(district.name)

    verdict = monitor.evaluator.evaluate(district.warning_area_id, monitor.clock())
    data = verdict.to_dict()
    data.update({"district": district.name, "area_id": district.warning_area_id})
    return jsonify(data)


@app.route("/location", methods=["POST"])
def push_location():
    """Accept a location fix pushed by the device"""
    data = request.get_json(silent=True)
    is_valid, error_msg = validate_location_payload(data)
    if not is_valid:
        logger.warning(f"Invalid location push: {error_msg}")
        raise ValidationError(error_msg)

    fix = LocationFix(
        latitude=parse_coordinate(data["latitude"]),
        longitude=parse_coordinate(data["longitude"]),
        source="manual" if data.get("source") == "manual" else "gps",
    )

    # Tracking subscribers receive the fix; otherwise apply it directly
    if not monitor.location_provider.publish(fix):
        monitor.update_location(fix)

    return jsonify(status_response())


@app.route("/location/error", methods=["POST"])
def push_location_error():
    """Accept a location-provider error pushed by the device"""
    data = request.get_json(silent=True)
    is_valid, error_msg = validate_location_error_payload(data)
    if not is_valid:
        raise ValidationError(error_msg)

    code, message = data.get("errorCode"), data["errorMessage"]
    if not monitor.location_provider.publish_error(code, message):
        monitor.handle_location_error(code, message)

    return jsonify(status_response())


@app.route("/simulate", methods=["POST"])
def simulate():
    """Use one of the predefined Portuguese cities as the current fix"""
    monitor.simulate_location()
    return jsonify(status_response())


@app.route("/refresh", methods=["POST"])
def refresh():
    """Refresh the warning feed and re-evaluate the current fix"""
    ok = monitor.refresh_all()
    return jsonify(status_response()), 200 if ok else 502


@app.route("/tracking/start", methods=["POST"])
def start_tracking():
    monitor.start_tracking()
    return jsonify(status_response())


@app.route("/tracking/stop", methods=["POST"])
def stop_tracking():
    monitor.stop_tracking()
    return jsonify(status_response())


@app.route("/status")
def get_status():
    return jsonify(status_response())


@app.route("/map")
def get_map_link():
    url = monitor.map_link()
    if url is None:
        data = status_response()
        data.update({"status": "error", "message": ERROR_NO_FIX})
        return jsonify(data), 404
    return jsonify({"map_url": url, "district": monitor.snapshot()["district"]})


@app.route("/forecast/<forecast_area_id>")
def get_forecast(forecast_area_id):
    """
    Fetch and cache the daily forecast for a district.

    Args:
        forecast_area_id: District forecast identifier

    Returns:
        JSON response with the raw payload and a daily table
    """
    if not validate_forecast_area_id(forecast_area_id):
        logger.warning(f"Invalid forecast area id in forecast request: {forecast_area_id}")
        raise ValidationError(ERROR_INVALID_FORECAST_AREA_ID)

    result = monitor.refresh_forecast(forecast_area_id)
    if not result.ok:
        raise result.error

    df = create_forecast_dataframe(result.data)
    district = next(
        (d.name for d in monitor.registry if d.forecast_area_id == forecast_area_id),
        UNKNOWN_DISTRICT,
    )
    return jsonify(
        {
            "forecast_area_id": forecast_area_id,
            "district": district,
            "forecast": forecast_records(df),
            "payload": result.data,
        }
    )


@app.route("/health")
def health_check():
    """Health check endpoint for monitoring"""
    health_status = health.get_health_status(monitor)
    status_code = 200 if health_status["status"] == "healthy" else 503
    return jsonify(health_status), status_code


if __name__ == "__main__":
    monitor.ensure_initialized()
    app.run(debug=Config.DEBUG, host="0.0.0.0", port=5000)
