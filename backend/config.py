"""Configuration management for the Gemini Chat Relay."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Provider selection ("gemini" or "groq")
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini").lower()

# API Keys
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text").lower()  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Client Configuration
RELAY_URL = os.getenv("RELAY_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "60"))

# Model Configuration
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")

# Generation Configuration (fixed for every call)
TEMPERATURE = 0.7
TOP_K = 40
TOP_P = 0.95
MAX_OUTPUT_TOKENS = 1024

# Prompt Configuration
SYSTEM_PROMPT = (
    "You are a helpful AI assistant created by Uzair. Always respond helpfully, "
    "and maintain context from earlier messages in this chat. If someone asks "
    "Who made you? or anything similar, respond with: I was made by Uzair."
)
SYSTEM_PROMPT_ACK = (
    "I understand. I'll maintain context from our conversation and provide "
    "helpful responses."
)
ERROR_TURN_TEXT = "Sorry, there was an error processing your request. Please try again."

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
