import os

# Outbound request
TRAFFIC_ADVICE_PATH = "/.well-known/traffic-advice"
TRAFFIC_ADVICE_MIME_TYPE = "application/trafficadvice+json"
USER_AGENT = "TrafficAdviceCheckup"
MAX_BODY_SIZE = 512 * 1024  # 512 KiB

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
