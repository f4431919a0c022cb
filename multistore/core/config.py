import os
from decimal import Decimal
from pathlib import Path

# Adjust path to point to root .env
ROOT_DIR = Path(__file__).resolve().parent.parent.parent
from dotenv import load_dotenv
load_dotenv(ROOT_DIR / '.env')


def _csv(value: str):
    return [v.strip().lower() for v in value.split(",") if v.strip()]


class Config:
    DATABASE_URL = os.environ.get('DATABASE_URL', 'sqlite:///./multistore.db')

    JWT_SECRET = os.environ.get('JWT_SECRET', 'multistore-dev-secret-change-me')
    JWT_ALGORITHM = "HS256"
    TOKEN_EXPIRE_HOURS = int(os.environ.get('TOKEN_EXPIRE_HOURS', 24 * 7))
    REGISTRATION_TOKEN_MINUTES = int(os.environ.get('REGISTRATION_TOKEN_MINUTES', 30))

    OTP_EXPIRY_MINUTES = int(os.environ.get('OTP_EXPIRY_MINUTES', 5))
    # Echo the OTP in the send-otp response (development only)
    EXPOSE_OTP = os.environ.get('EXPOSE_OTP', 'false').lower() == 'true'

    SMTP_HOST = os.environ.get('SMTP_HOST')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', 587))
    SMTP_USER = os.environ.get('SMTP_USER')
    SMTP_PASS = os.environ.get('SMTP_PASS')

    SUPER_ADMIN_EMAILS = _csv(os.environ.get('SUPER_ADMIN_EMAILS', ''))

    BASE_DOMAIN = os.environ.get('BASE_DOMAIN', 'yourdomain.com')
    LOCAL_HOSTS = _csv(os.environ.get('LOCAL_HOSTS', 'localhost,127.0.0.1,testserver'))

    TAX_RATE = Decimal(os.environ.get('TAX_RATE', '0.18'))
    FREE_SHIPPING_THRESHOLD = Decimal(os.environ.get('FREE_SHIPPING_THRESHOLD', '500'))
    SHIPPING_FEE = Decimal(os.environ.get('SHIPPING_FEE', '50'))
    LOW_STOCK_THRESHOLD = int(os.environ.get('LOW_STOCK_THRESHOLD', 10))

    UPLOAD_DIR = Path(os.environ.get('UPLOAD_DIR', 'uploads'))
    MAX_UPLOAD_SIZE = int(os.environ.get('MAX_UPLOAD_SIZE', 5 * 1024 * 1024))
    ALLOWED_UPLOAD_TYPES = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ]

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(",")

settings = Config()
