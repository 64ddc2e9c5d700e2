import os

from dotenv import load_dotenv

# Load from .env if it exists (useful for local development)
load_dotenv()

LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "INFO").upper()

# Credential store (Supabase / PostgREST)
CREDENTIALS_TABLE = "llm_api_credentials"
CREDENTIALS_TIMEOUT_S = 10.0

# Outbound HTTP client; provider deadlines are enforced by the retry wrapper
HTTP_TIMEOUT_S = 30.0

# Provider endpoints and fixed models
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GROQ_MODEL = "llama3-8b-8192"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = "gemini-2.0-flash-exp"
RAPIDAPI_HOST = "chatgpt-42.p.rapidapi.com"
RAPIDAPI_URL = f"https://{RAPIDAPI_HOST}/gpt4"
MAX_OUTPUT_TOKENS = 1500

# Generation defaults
DEFAULT_AI_TEMPERATURE = 70
DEFAULT_CONTENT_LENGTH = 60
MAX_TAGS = 10

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# HTTP surface
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

