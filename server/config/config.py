import os

''' Environment driven settings for the registration server '''

MONGODB_URI = os.getenv("MONGODB_URI")
MONGODB_USERNAME = os.getenv("MONGODB_USERNAME", "")
MONGODB_PASSWORD = os.getenv("MONGODB_PASSWORD", "")
CLUSTER_NAME = os.getenv("CLUSTER_NAME", "")
APP_NAME = os.getenv("APP_NAME", "EventRegistration")
DATABASE_NAME = os.getenv("DATABASE_NAME", "event_registrations")

SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Timezone used to split registration timestamps into date and time columns
EXPORT_TIMEZONE = os.getenv("EXPORT_TIMEZONE", "UTC")
RECENT_REGISTRATION_DAYS = int(os.getenv("RECENT_REGISTRATION_DAYS", "7"))
TOP_INSTITUTIONS_LIMIT = int(os.getenv("TOP_INSTITUTIONS_LIMIT", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
