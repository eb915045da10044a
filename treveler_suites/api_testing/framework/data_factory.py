"""
================================================================================
Test Data Factory
================================================================================

Request payloads and random values for the Treveler API tests.

Features:
- Timestamp-suffixed names and emails, unique per second
- Enumerations of the values the backend accepts
- Payload factories for hotels, locations, stays, members, events, users
  and comments, each with a reproducible seed
- Cleanup tracking for automatic teardown

================================================================================
"""

import json
import random
import string
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type

from loguru import logger


TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


# ================================================================================
# Enumerations
# ================================================================================

class HotelType(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class LocationType(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class EventMode(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    PRIVATE = "private"


class EventPolicy(str, Enum):
    FREE = "free"
    MODERATED = "moderated"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class LanguageCode(str, Enum):
    EN = "en"
    ES = "es"
    FR = "fr"
    DE = "de"
    HY = "hy"
    RU = "ru"
    IT = "it"
    PT = "pt"


class CurrencyCode(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    AMD = "AMD"
    RUB = "RUB"


class UserType(str, Enum):
    """Login emails of the seeded test accounts."""
    GUEST = "test@example.com"
    HOTEL_SUPER_ADMIN = "hotel_admin@example.com"
    PLATFORM_SUPER_ADMIN = "admin@example.com"


# ================================================================================
# Generators
# ================================================================================

def generate_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def generate_name(prefix: str, separator: str = "-") -> str:
    """
    Name unique to the second.

    Examples:
        >>> generate_name("Hotel")  # doctest: +SKIP
        'Hotel-20250101120000'
    """
    name = f"{prefix}{separator}{generate_timestamp()}"
    logger.debug(f"Generated name: {name}")
    return name


def generate_email(prefix: str = "test", domain: str = "test.com") -> str:
    return f"{prefix}-{generate_timestamp()}@{domain}"


def generate_date(days_offset: int = 0) -> str:
    """Local date ``days_offset`` days from today as YYYY-MM-DD."""
    return (datetime.now() + timedelta(days=days_offset)).strftime(DATE_FORMAT)


def generate_datetime(hours_offset: int = 0) -> str:
    """Local datetime ``hours_offset`` hours from now as YYYY-MM-DDTHH:MM:SS."""
    return (datetime.now() + timedelta(hours=hours_offset)).strftime(DATETIME_FORMAT)


def generate_future_date_utc(days_from_now: int) -> str:
    """UTC midnight of the day ``days_from_now`` days ahead, e.g. 2025-01-02T00:00:00Z."""
    day = datetime.now(timezone.utc) + timedelta(days=days_from_now)
    return day.strftime("%Y-%m-%dT00:00:00Z")


def generate_uuid() -> str:
    return str(uuid.uuid4())


def generate_random_int(min_value: int, max_value: int, rng: Optional[random.Random] = None) -> int:
    """Inclusive on both ends."""
    return (rng or random).randint(min_value, max_value)


def generate_random_string(length: int = 10, rng: Optional[random.Random] = None) -> str:
    chars = string.ascii_letters + string.digits
    return "".join((rng or random).choice(chars) for _ in range(length))


def generate_phone_number(rng: Optional[random.Random] = None) -> str:
    return f"+1{generate_random_int(1000000000, 1999999999, rng)}"


def random_enum_value(enum_cls: Type[Enum], rng: Optional[random.Random] = None) -> Any:
    """Wire value of a random member of ``enum_cls``."""
    return (rng or random).choice(list(enum_cls)).value


# ================================================================================
# Data Models
# ================================================================================

@dataclass
class GeneratedData:
    """Container for generated test data with metadata."""
    data: Dict[str, Any]
    data_type: str
    created_at: datetime = field(default_factory=datetime.now)
    cleanup_handler: Optional[Callable] = None

    def __post_init__(self):
        self.tracking_id = uuid.uuid4().hex[:8]


# ================================================================================
# Factory Base
# ================================================================================

class DataFactoryBase:
    """
    Base class for payload factories.

    Each factory owns its random generator, so a seed makes its random
    fields reproducible without touching the global ``random`` state.
    Time-based fields (names, dates) still follow the clock.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)
        self._generated_items: List[GeneratedData] = []

    def _choice(self, options: List[Any]) -> Any:
        return self._random.choice(options)

    def _enum(self, enum_cls: Type[Enum]) -> Any:
        return random_enum_value(enum_cls, self._random)

    def _bool(self) -> bool:
        return self._random.random() < 0.5

    def _coordinate(self, limit: float) -> float:
        return round(self._random.uniform(-limit, limit), 6)

    def _price(self, min_value: float = 0.0, max_value: float = 100.0) -> float:
        return round(self._random.uniform(min_value, max_value), 2)

    def _random_string(self, length: int = 10) -> str:
        return generate_random_string(length, self._random)

    def track(self, data: Dict[str, Any], data_type: str,
              cleanup_handler: Optional[Callable] = None) -> GeneratedData:
        """
        Track created data for later cleanup.

        Args:
            data: The created resource (usually the response body)
            data_type: Type of data (e.g., "location", "stay")
            cleanup_handler: Called with ``data`` on cleanup
        """
        generated = GeneratedData(
            data=data,
            data_type=data_type,
            cleanup_handler=cleanup_handler
        )
        self._generated_items.append(generated)
        return generated

    def cleanup_all(self):
        """Clean up all tracked data in reverse order."""
        for item in reversed(self._generated_items):
            if item.cleanup_handler:
                try:
                    item.cleanup_handler(item.data)
                except Exception as e:
                    logger.warning(f"Cleanup failed for {item.data_type}: {e}")

        self._generated_items.clear()

    @property
    def generated_count(self) -> int:
        return len(self._generated_items)


# ================================================================================
# Hotel Factories
# ================================================================================

class HotelFactory(DataFactoryBase):
    """Payloads for POST/PATCH /hotels."""

    STREETS = ["Main St", "Oak Ave", "Park Blvd", "Broadway", "Sunset Dr", "River Rd"]

    def create_valid(self, name: Optional[str] = None, **overrides) -> Dict[str, Any]:
        timestamp = generate_timestamp()
        data = {
            "name": name or generate_name("Hotel"),
            "description": f"Hotel - {timestamp}",
            "contacts_json": json.dumps({
                "phone": "+1234567890",
                "email": f"hotel-{timestamp}@test.com",
                "website": f"https://hotel-{timestamp}.com",
            }),
            "address_text": (
                f"{self._random.randint(1, 9999)} {self._choice(self.STREETS)}, City-{timestamp}"
            ),
            "lat": self._coordinate(90),
            "lon": self._coordinate(180),
            "is_active": self._bool(),
            "pre_moderated": self._bool(),
            "hotel_type": self._enum(HotelType),
            "event_policy": self._enum(EventPolicy),
        }
        data.update(overrides)
        return data


class LocationFactory(DataFactoryBase):
    """Payloads for hotel locations."""

    def create_valid(self, **overrides) -> Dict[str, Any]:
        data = {
            "name": generate_name("Location"),
            "text": generate_name("LocationText"),
            "lat": self._coordinate(90),
            "lon": self._coordinate(180),
            "pre_moderated": self._bool(),
            "is_active": self._bool(),
            "location_type": self._enum(LocationType),
        }
        data.update(overrides)
        return data


class StayFactory(DataFactoryBase):
    """Payloads for hotel stays; dates are UTC midnights in the future."""

    def create_valid(
        self,
        user_id: str,
        start_in_days: int = 1,
        length_days: int = 6,
        **overrides
    ) -> Dict[str, Any]:
        data = {
            "user_id": user_id,
            "room_number": generate_name("Room"),
            "start_at": generate_future_date_utc(start_in_days),
            "end_at": generate_future_date_utc(start_in_days + length_days),
        }
        data.update(overrides)
        return data

    def create_member(self, user_id: str, role: str = "staff") -> Dict[str, Any]:
        return {"user_id": user_id, "role": role}


# ================================================================================
# Event Factory
# ================================================================================

class EventFactory(DataFactoryBase):
    """Payloads for POST /events."""

    def create_valid(
        self,
        hotel_id: str,
        hotel_location_id: Optional[str] = None,
        **overrides
    ) -> Dict[str, Any]:
        timestamp = generate_timestamp()
        languages = self._random.sample(
            [code.value for code in LanguageCode], k=self._random.randint(1, 3)
        )
        data = {
            "hotel_id": hotel_id,
            "hotel_location_id": hotel_location_id,
            "mode": self._enum(EventMode),
            "activity_type_code": f"ACT-{timestamp}",
            "name": generate_name("Event"),
            "description_short": f"Short description - {timestamp}",
            "description_long": f"Long description - {timestamp}",
            "start_at": generate_datetime(hours_offset=24),
            "duration_min": self._random.randint(30, 240),
            "max_attendees": self._random.randint(5, 100),
            "age_restricted": self._bool(),
            "cover_image_url": f"https://example.com/covers/{self._random_string(8)}.jpg",
            "comments_enabled": True,
            "languages": languages,
            "price": self._price(),
            "currency_code": self._enum(CurrencyCode),
            "attendance_required": self._bool(),
        }
        data.update(overrides)
        return data


# ================================================================================
# User and Comment Factories
# ================================================================================

class UserFactory(DataFactoryBase):
    """Payloads for PATCH /users/me."""

    def create_update(self, **overrides) -> Dict[str, Any]:
        timestamp = generate_timestamp()
        age = self._random.randint(18, 80)
        data = {
            "first_name": f"TestUser-{timestamp}",
            "last_name": f"Automation-{timestamp}",
            "gender": self._enum(Gender),
            "birthdate": (datetime.now() - timedelta(days=365 * age)).strftime(DATE_FORMAT),
        }
        data.update(overrides)
        return data


class CommentFactory(DataFactoryBase):

    def create_valid(self, body: Optional[str] = None, **overrides) -> Dict[str, Any]:
        data = {"body": body or f"Test comment - {generate_timestamp()}"}
        data.update(overrides)
        return data


# ================================================================================
# Composite Factory
# ================================================================================

class TestDataFactory:
    """
    Composite factory providing access to all data factories.

    Usage:
        factory = TestDataFactory(seed=42)
        hotel = factory.hotel.create_valid()
        event = factory.event.create_valid(hotel_id="h1")
    """
    __test__ = False

    def __init__(self, seed: Optional[int] = None):
        self.hotel = HotelFactory(seed)
        self.location = LocationFactory(seed)
        self.stay = StayFactory(seed)
        self.event = EventFactory(seed)
        self.user = UserFactory(seed)
        self.comment = CommentFactory(seed)

        self._all_factories = [
            self.hotel, self.location, self.stay, self.event, self.user, self.comment
        ]

    def cleanup_all(self):
        for factory in self._all_factories:
            factory.cleanup_all()

    @property
    def total_generated(self) -> int:
        return sum(f.generated_count for f in self._all_factories)
