import os
from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
GEMINI_TIMEOUT_MS = int(os.environ.get("GEMINI_TIMEOUT_MS", "300000"))

DEFAULT_MODEL = os.environ.get("UIFORGE_MODEL", "gemini-3-flash-preview")
DATA_DIR = os.environ.get("UIFORGE_DATA_DIR", ".uiforge")

PORT = int(os.environ.get("PORT", "5001"))
DEBUG = os.environ.get("UIFORGE_DEBUG", "1").lower() in ("1", "true", "yes")

# Storage keys, one JSON snapshot per collection
NOTES_KEY = "uiforge_notes"
PROMPTS_KEY = "uiforge_prompts"
METHODOLOGIES_KEY = "uiforge_methodologies"

MAX_NOTE_IMAGES = 4
