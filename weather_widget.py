# weather_widget.py
import logging
import threading
from types import MappingProxyType

import pandas as pd
from flask import render_template

from weather_lookup import WeatherServiceError, fetch_weather

FALLBACK_ERROR = "Failed to load weather data"
DEFAULT_ICON = '🌤️'

WEATHER_ICONS = MappingProxyType({
    0: '☀️',                                    # clear
    1: '🌤️', 2: '⛅',                          # partly cloudy
    3: '☁️',                                    # overcast
    45: '🌫️', 48: '🌫️',                        # fog
    51: '🌦️', 53: '🌧️', 55: '🌧️', 56: '🌧️', 57: '🌧️',  # drizzle
    61: '🌧️', 63: '🌧️', 65: '🌧️', 66: '🌧️', 67: '🌧️',  # rain
    80: '🌧️', 81: '🌧️', 82: '🌧️',
    71: '❄️', 73: '❄️', 75: '❄️', 77: '❄️',     # snow
    85: '❄️', 86: '❄️',
    95: '⛈️', 96: '⛈️', 99: '⛈️',              # thunderstorm
})


def weather_icon(code):
    return WEATHER_ICONS.get(code, DEFAULT_ICON)


def format_updated(timestamp):
    """Observation time as HH:MM (the API already returns it in local time)."""
    return pd.to_datetime(timestamp).strftime('%H:%M')


class WeatherWidget:
    """Result panel plus the lookup flow that fills it.

    Each lookup takes a new generation number; a lookup that completes after
    a newer one has started is dropped instead of overwriting the panel.
    """

    def __init__(self, fetch=fetch_weather):
        self.fetch = fetch
        self.html = ''
        self.visible = True
        self.loading = False
        self.generation = 0
        self._lock = threading.Lock()

    def submit(self, raw):
        city = (raw or '').strip()
        if not city:
            return None
        return self.lookup(city)

    def lookup(self, city):
        """Runs one lookup and returns the panel it rendered.

        The returned panel always belongs to this lookup and has left the
        Loading state; ``current`` is False when a newer lookup started in
        the meantime, in which case the stored panel was left alone.
        """
        with self._lock:
            self.generation += 1
            generation = self.generation
            self.visible = False
            self.loading = True

        html = None
        try:
            result = self.fetch(city)
            html = render_template(
                'weather_result.html',
                result=result,
                icon=weather_icon(result.weathercode),
                updated=format_updated(result.time),
            )
        except WeatherServiceError as e:
            logging.error(f"Weather lookup for '{city}' failed: {e}")
            html = render_template('weather_error.html', message=str(e) or FALLBACK_ERROR)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            # malformed payload
            logging.error(f"Weather lookup for '{city}' failed: {e!r}", exc_info=True)
            html = render_template('weather_error.html', message=FALLBACK_ERROR)
        finally:
            with self._lock:
                current = generation == self.generation
                if current:
                    if html is not None:
                        self.html = html
                    self.loading = False
                    self.visible = True
                else:
                    logging.info(f"Discarding stale lookup #{generation} for '{city}'.")

        return {
            'html': html,
            'visible': True,
            'loading': False,
            'generation': generation,
            'current': current,
        }

    def state(self):
        with self._lock:
            return {
                'html': self.html,
                'visible': self.visible,
                'loading': self.loading,
                'generation': self.generation,
            }
