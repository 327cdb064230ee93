"""Chat Service Configuration."""
import os
from pathlib import Path
from dotenv import load_dotenv

from nagarassist.config import SERVICE_PORTS

# Load .env file from service directory
service_dir = Path(__file__).parent
env_file = service_dir / ".env"
if env_file.exists():
    load_dotenv(env_file)

# Service Configuration
PORT = int(os.getenv("PORT", str(SERVICE_PORTS["chat"])))
SERVICE_NAME = os.getenv("SERVICE_NAME", "chat")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Simulated typing pauses, in seconds
REPLY_DELAY_SECONDS = float(os.getenv("REPLY_DELAY_SECONDS", "1.5"))
QUICK_ACTION_DELAY_SECONDS = float(os.getenv("QUICK_ACTION_DELAY_SECONDS", "1.0"))

# WhatsApp support line used for complaint hand-off
WHATSAPP_NUMBER = os.getenv("WHATSAPP_NUMBER", "918808201876")
