# weather_lookup.py
import json
import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd
import requests

# --- Configuration ---
GEOCODING_API_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_API_URL = "https://api.open-meteo.com/v1/forecast"
REQUEST_TIMEOUT = 30  # seconds

LOG_FILE = "weather_app_log.txt"

# Hourly variables requested alongside the current conditions (exact API names)
HOURLY_VARIABLES = [
    'temperature_2m',
    'relativehumidity_2m',
    'pressure_msl',
]


class WeatherServiceError(Exception):
    """Raised when a collaborator call or its payload fails."""


class CityNotFoundError(WeatherServiceError):
    """Raised when geocoding returns no match."""


@dataclass
class Location:
    latitude: float
    longitude: float


@dataclass
class WeatherResult:
    city: str
    temperature: float
    windspeed: float
    weathercode: int
    time: str
    humidity: Optional[float] = None
    pressure: Optional[float] = None


def configure_logging(log_file=LOG_FILE):
    """Root logger to a file (DEBUG) and the console (INFO)."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    file_handler = logging.FileHandler(log_file, mode='w')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    return logger


def _get_json(url, params):
    """GET a collaborator endpoint and decode its JSON body."""
    logging.info(f"Fetching {url} with {params}")
    try:
        response = requests.get(url, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        logging.error(f"Error fetching {url}: {e}")
        raise WeatherServiceError(str(e)) from e
    except json.JSONDecodeError as e:
        logging.error(f"Failed to decode JSON response from {url}. Response text was:")
        logging.error(response.text[:500])
        raise WeatherServiceError(str(e)) from e


def geocode_city(name: str) -> Location:
    """Resolves a city name to the coordinates of its first match."""
    data = _get_json(GEOCODING_API_URL, {'name': name})
    results = data.get('results') if isinstance(data, dict) else None
    if not results:
        logging.warning(f"No geocoding match for '{name}'.")
        raise CityNotFoundError("City not found")

    first = results[0]
    location = Location(latitude=first['latitude'], longitude=first['longitude'])
    logging.info(f"Geocoded '{name}' to {first.get('name')}, {first.get('country')} "
                 f"({location.latitude}, {location.longitude})")
    return location


def fetch_forecast(latitude: float, longitude: float) -> dict:
    """Fetches current conditions plus the hourly variables for a point."""
    params = {
        'latitude': latitude,
        'longitude': longitude,
        'current_weather': 'true',
        'hourly': ','.join(HOURLY_VARIABLES),
        'timezone': 'auto',
    }
    data = _get_json(FORECAST_API_URL, params)
    if not isinstance(data, dict):
        logging.error(f"API did not return a dictionary as expected. Type received: {type(data)}")
        raise WeatherServiceError("Unexpected forecast response")
    logging.info("Forecast data fetched successfully.")
    return data


def build_hourly_frame(hourly: dict) -> pd.DataFrame:
    """Turns the parallel hourly arrays into a DataFrame indexed by position.

    Variables that are missing or whose length does not match ``time`` become
    all-None columns instead of failing the lookup.
    """
    times = hourly.get('time') or []
    logging.debug(f"Processing {len(times)} hourly samples.")

    processed = {'time': times}
    for var in HOURLY_VARIABLES:
        values = hourly.get(var)
        if values is None:
            logging.warning(f"Variable '{var}' not found in forecast response. Skipping.")
            processed[var] = [None] * len(times)
        elif not isinstance(values, list) or len(values) != len(times):
            logging.error(f"Data length mismatch or invalid format for hourly variable '{var}'. Skipping.")
            processed[var] = [None] * len(times)
        else:
            processed[var] = values

    # object dtype keeps the values exactly as the API sent them
    return pd.DataFrame(processed, dtype=object)


def _scalar(value):
    return None if value is None or pd.isna(value) else value


def current_conditions(city: str, data: dict) -> WeatherResult:
    """Extracts the current conditions and the hourly values aligned to them."""
    current = data.get('current_weather')
    if not isinstance(current, dict) or not current:
        logging.error("Invalid data from API (missing 'current_weather' key).")
        raise WeatherServiceError("Forecast response has no current weather")

    hourly = data.get('hourly')
    if not isinstance(hourly, dict):
        logging.warning(f"Hourly data is missing or not an object ({type(hourly)}); humidity and pressure unavailable.")
        hourly = {}
    frame = build_hourly_frame(hourly)
    matches = frame.index[frame['time'] == current['time']]

    humidity = pressure = None
    if len(matches) > 0:
        row = matches[0]
        humidity = _scalar(frame.at[row, 'relativehumidity_2m'])
        pressure = _scalar(frame.at[row, 'pressure_msl'])
    else:
        logging.warning(f"No hourly sample at {current['time']}; humidity and pressure unavailable.")

    return WeatherResult(
        city=city,
        temperature=current['temperature'],
        windspeed=current['windspeed'],
        weathercode=current['weathercode'],
        time=current['time'],
        humidity=humidity,
        pressure=pressure,
    )


def fetch_weather(city: str) -> WeatherResult:
    """Geocodes the city, then fetches and processes its forecast."""
    logging.info(f"Looking up weather for '{city}'...")
    location = geocode_city(city)
    data = fetch_forecast(location.latitude, location.longitude)
    return current_conditions(city, data)
