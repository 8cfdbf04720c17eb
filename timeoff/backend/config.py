"""
Process-wide configuration loaded from the environment (and .env).
"""
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")

# Annual allowance per leave type
VACATION_QUOTA = int(os.getenv("VACATION_QUOTA", "20"))
SICK_QUOTA = int(os.getenv("SICK_QUOTA", "14"))

# 'block' refuses entries that exceed the remaining quota, 'warn' lets them through
QUOTA_POLICY = os.getenv("QUOTA_POLICY", "block").lower()

# Planning advisor. Gemini serves an OpenAI-compatible endpoint.
AI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or os.getenv("OPENAI_API_KEY")
AI_BASE_URL = os.getenv("AI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
AI_MODEL = os.getenv("AI_MODEL", "gemini-2.0-flash")
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.7"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
FLASK_MAIN_PORT = int(os.getenv("FLASK_MAIN_PORT", "5000"))
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:3001")
