"""Default provider endpoints and display settings."""

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
OPENWEATHER_ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"
API_KEY_ENV = "OPENWEATHER_API_KEY"

DEFAULT_CITY = "New York"
DEFAULT_CONFIG_PATH = "config/skycast.yaml"
DEFAULT_DB_PATH = "data/skycast.db"
