# barbershop/data.py

# Shop hours used until an admin saves the global schedule
DEFAULT_OPERATING_HOURS = {
    "monday": {"active": True, "open": "08:00", "close": "18:00"},
    "tuesday": {"active": True, "open": "08:00", "close": "18:00"},
    "wednesday": {"active": True, "open": "08:00", "close": "18:00"},
    "thursday": {"active": True, "open": "08:00", "close": "18:00"},
    "friday": {"active": True, "open": "08:00", "close": "18:00"},
    "saturday": {"active": True, "open": "08:00", "close": "13:00"},
    "sunday": {"active": False},
}

# Seeded into an empty catalogue (minutes, price)
DEFAULT_SERVICES = [
    {"name": "haircut", "duration": 30, "price": 40.0},
    {"name": "beard_trim", "duration": 30, "price": 25.0},
    {"name": "cut_and_beard", "duration": 60, "price": 60.0},
    {"name": "fade", "duration": 45, "price": 45.0},
    {"name": "hair_coloring", "duration": 90, "price": 120.0},
]
