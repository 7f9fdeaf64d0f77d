from pymongo.errors import PyMongoError
import datetime
import json
import sqlite3
import logging

from utils import JSONEncoder

# Configure logging
logger = logging.getLogger(__name__)

# Key under which the fallback booking list is stored
MOCK_STORAGE_KEY = 'mock_bookings_v1'


class MemoryStorage:
    """Key/value storage held in the current process. Used by tests."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value


class SqliteStorage:
    """Key/value storage in a local SQLite file."""

    def __init__(self, path='local_data.db'):
        self.path = path
        self.initialize_db()

    # SQLite connection
    def get_db_connection(self):
        return sqlite3.connect(self.path, check_same_thread=False)

    # Create the local table if missing
    def initialize_db(self):
        try:
            with self.get_db_connection() as conn:
                cursor = conn.cursor()
                cursor.execute('''
                CREATE TABLE IF NOT EXISTS kv_store (
                                key TEXT PRIMARY KEY,
                                value TEXT
                            )''')
                conn.commit()
                logger.info("Database initialized successfully.")
        except sqlite3.Error as e:
            logger.error(f"Error initializing database: {e}")
            raise

    def get(self, key):
        with self.get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT value FROM kv_store WHERE key = ?', (key,))
            row = cursor.fetchone()
            return row[0] if row else None

    def set(self, key, value):
        with self.get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute('INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)', (key, value))
            conn.commit()


def default_mock_bookings():
    """Example bookings written into an empty fallback cache."""
    created_at = datetime.datetime.now(datetime.timezone.utc).isoformat()
    return [
        {
            "id": "mock-1",
            "vehicle_id": "deepol-s05",
            "vehicle_name": "Deepol S05",
            "start_date": "2026-06-15",
            "end_date": "2026-06-20",
            "customer_name": "John Doe",
            "customer_email": "john@example.com",
            "phone_number": "+94 77 123 4567",
            "pickup_location": "Colombo",
            "dropoff_location": "Kandy",
            "notes": "Looking for a reliable car.",
            "status": "PENDING",
            "total_price": 225,
            "created_at": created_at
        },
        {
            "id": "mock-2",
            "vehicle_id": "toyota-axio",
            "vehicle_name": "Toyota Axio",
            "start_date": "2026-07-01",
            "end_date": "2026-07-05",
            "customer_name": "Jane Smith",
            "customer_email": "jane@test.com",
            "phone_number": "+94 71 987 6543",
            "pickup_location": "Kandy",
            "dropoff_location": "Colombo",
            "notes": "Airport transfer needed.",
            "status": "PENDING",
            "total_price": 180,
            "created_at": created_at
        },
        {
            "id": "mock-3",
            "vehicle_id": "toyota-hiace",
            "vehicle_name": "Toyota HiAce",
            "start_date": "2026-05-10",
            "end_date": "2026-05-12",
            "customer_name": "Alice Brown",
            "customer_email": "alice@test.com",
            "phone_number": "+94 70 111 2222",
            "pickup_location": "Galle",
            "dropoff_location": "Matara",
            "status": "APPROVED",
            "total_price": 120,
            "created_at": created_at
        }
    ]


class BookingCache:
    """Fallback booking list, stored as one JSON array under a fixed key."""

    def __init__(self, storage, key=MOCK_STORAGE_KEY, seed=default_mock_bookings):
        self.storage = storage
        self.key = key
        self.seed = seed

    def load(self):
        stored = self.storage.get(self.key)
        if stored:
            return json.loads(stored)
        # Initialize if empty
        bookings = self.seed() if self.seed else []
        self.save(bookings)
        logger.info(f"Seeded fallback cache with {len(bookings)} bookings.")
        return bookings

    def save(self, bookings):
        self.storage.set(self.key, json.dumps(bookings, cls=JSONEncoder))

    def append(self, record):
        bookings = self.load()
        bookings.append(record)
        self.save(bookings)
        return record

    def find(self, booking_id):
        for booking in self.load():
            if booking.get("id") == booking_id:
                return booking
        return None

    def update(self, booking_id, changes):
        """Apply changes to the record with booking_id. Returns the record, or None if absent."""
        bookings = self.load()
        for index, booking in enumerate(bookings):
            if booking.get("id") == booking_id:
                bookings[index] = {**booking, **changes}
                self.save(bookings)
                return bookings[index]
        return None


def is_mongodb_connected(db):
    """Check whether MongoDB answers a ping."""
    try:
        db.command('ping')
        logger.info("MongoDB is connected.")
        return True
    except PyMongoError as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False
