import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# OpenAI (read directly by ChatOpenAI as well)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# Offer copy generation model
OFFER_COPY_MODEL = os.getenv("OFFER_COPY_MODEL", "gpt-4o")
OFFER_COPY_TEMPERATURE = float(os.getenv("OFFER_COPY_TEMPERATURE", "0.7"))

# JWT authentication
AUTH_JWKS_URL = os.getenv("AUTH_JWKS_URL")
AUTH_JWT_ISSUER = os.getenv("AUTH_JWT_ISSUER")
AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE", "authenticated")

# CORS
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]
