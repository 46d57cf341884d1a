"""LaunchScope Flask application entrypoint."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from .backend import (
    CancellationToken,
    LaunchBriefing,
    LaunchDataService,
    ResourceError,
)
from .backend.models import parse_day
from .config import Settings, get_settings


def create_app(settings: Optional[Settings] = None, data_service: Optional[LaunchDataService] = None) -> Flask:
    settings = settings or get_settings()
    data_service = data_service or LaunchDataService(settings)

    app = Flask(__name__)
    app.config.update(JSON_SORT_KEYS=False)
    CORS(app)

    def _token() -> CancellationToken:
        return CancellationToken.with_timeout(settings.command_timeout_s)

    @app.errorhandler(ResourceError)
    def upstream_failed(exc: ResourceError) -> Any:
        return jsonify({"error": str(exc), "resource": exc.resource}), 502

    @app.errorhandler(ValueError)
    def bad_request(exc: ValueError) -> Any:
        return jsonify({"error": str(exc)}), 400

    @app.route("/api/launches", methods=["GET"])
    def launches() -> Any:
        cancel = _token()
        query = data_service.build_query(**_query_filters(settings))
        found = data_service.get_launches(query, cancel)

        rockets = data_service.try_fetch("rockets", lambda: data_service.get_rockets(cancel))
        crew = data_service.try_fetch("crew members", lambda: data_service.get_crew_members(cancel))
        launchpads = None
        if _flag("launchpad") or _flag("weather"):
            launchpads = data_service.try_fetch("launchpads", lambda: data_service.get_launchpads(cancel))

        briefings = data_service.build_briefings(
            found,
            rockets=rockets,
            crew=crew,
            launchpads=launchpads,
            include_weather=_flag("weather"),
            include_asteroids=_flag("asteroids"),
            cancel=cancel,
        )
        return jsonify({
            "query": query,
            "count": len(briefings),
            "launches": [_serialise_briefing(item) for item in briefings],
        })

    @app.route("/api/launches/cost", methods=["GET"])
    def launch_cost() -> Any:
        cancel = _token()
        query = data_service.build_query(**_query_filters(settings))
        found = data_service.get_launches(query, cancel)
        rockets = data_service.get_rockets(cancel)
        return jsonify({"count": len(found), "total_cost": data_service.total_cost(found, rockets)})

    @app.route("/api/earth-events", methods=["GET"])
    def earth_events() -> Any:
        longitude = float(_required_arg("lon"))
        latitude = float(_required_arg("lat"))
        day = parse_day(_required_arg("date"))
        events = data_service.get_earth_events(longitude, latitude, day, _token())
        return jsonify({"events": [asdict(event) for event in events]})

    @app.route("/api/asteroids", methods=["GET"])
    def asteroids() -> Any:
        day = parse_day(_required_arg("date"))
        feed = data_service.get_asteroids(day, _token())
        return jsonify({
            "summary": asdict(feed.summary()),
            "objects": [asdict(asteroid) for asteroid in feed.asteroids()],
        })

    @app.route("/api/health", methods=["GET"])
    def health() -> Any:
        return jsonify(data_service.get_health_snapshot(_token()))

    return app


def _flag(name: str) -> bool:
    return request.args.get(name, "").lower() in ("1", "true", "yes")


def _required_arg(name: str) -> str:
    value = request.args.get(name)
    if not value:
        raise ValueError(f"missing query parameter: {name}")
    return value


def _query_filters(settings: Settings) -> Dict[str, Any]:
    return {
        "start": request.args.get("start"),
        "end": request.args.get("end"),
        "failed": _flag("failed"),
        "upcoming": _flag("upcoming"),
        "ascending": _flag("ascending"),
        "limit": int(request.args.get("limit", settings.default_limit)),
    }


def _serialise_briefing(briefing: LaunchBriefing) -> Dict[str, object]:
    item = briefing.correlated
    launch = item.launch
    payload: Dict[str, object] = {
        "id": launch.id,
        "flight_number": launch.flight_number,
        "name": launch.name,
        "date_utc": launch.date.isoformat() if launch.date else None,
        "outcome": launch.outcome.value,
        "rocket": item.rocket_name,
        "cost_per_launch": item.cost_per_launch,
        "crew": list(item.crew_names),
        "details": launch.details,
    }
    if item.launchpad is not None:
        payload["launchpad"] = {
            "name": item.launchpad.name,
            "locality": item.launchpad.locality,
            "latitude": item.launchpad.latitude,
            "longitude": item.launchpad.longitude,
            "details": item.launchpad.details,
        }
    if briefing.weather_events is not None:
        payload["weather_events"] = [
            {"title": event.title, "description": event.description} for event in briefing.weather_events
        ]
    if briefing.asteroids is not None:
        payload["asteroids"] = asdict(briefing.asteroids)
    return payload


if __name__ == "__main__":
    _settings = get_settings()
    create_app(_settings).run(debug=_settings.debug)
