import os
from dotenv import load_dotenv
from pymongo import MongoClient
import logging

# Load environment variables from .env
load_dotenv()

# MongoDB connection
MONGO_URI = os.getenv("MONGODB_CONNECTION_STRING")
MONGO_DATABASE = os.getenv("MONGODB_DATABASE", "rental_system")
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "3000"))
client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=MONGO_TIMEOUT_MS)
db = client[MONGO_DATABASE]

# Logging
logging.basicConfig(
    filename='system.log',
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# JWT secret for the admin session
SECRET_KEY = os.getenv("SECRET_KEY")

# Fallback cache file used when MongoDB is unreachable
LOCAL_DB_PATH = os.getenv("LOCAL_DB_PATH", "local_data.db")

# How long the booking form waits for the write before moving on
BOOKING_TIMEOUT_SECONDS = float(os.getenv("BOOKING_TIMEOUT_SECONDS", "8"))

# Staff number that receives booking requests
WHATSAPP_NUMBER = os.getenv("WHATSAPP_NUMBER", "94767439588")
