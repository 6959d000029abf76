import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

API_NAME = os.getenv("API_NAME", "video-talker-api")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# Credential issuance for the TURN relay (Twilio Network Traversal Service)
ACCOUNT_SID = os.getenv("ACCOUNT_SID", None)
AUTH_TOKEN = os.getenv("AUTH_TOKEN", None)
TURN_API_BASE_URL = os.getenv("TURN_API_BASE_URL", "https://api.twilio.com")
TURN_API_TIMEOUT = float(os.getenv("TURN_API_TIMEOUT", 10))
