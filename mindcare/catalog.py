# therapy module catalog and the store keys each module writes to
# the catalog order is the order modules appear in every progress record

DEFAULT_TOTAL_SESSIONS = 30

THERAPY_MODULES = [
    {"id": "cbt", "name": "CBT Journaling", "category": "cognitive", "total_sessions": 30},
    {"id": "mindfulness", "name": "Mindfulness", "category": "mindfulness", "total_sessions": 30},
    {"id": "stress", "name": "Stress Management", "category": "stress", "total_sessions": 30},
    {"id": "gratitude", "name": "Gratitude Journal", "category": "positive", "total_sessions": 30},
    {"id": "music", "name": "Relaxation Music", "category": "relaxation", "total_sessions": 30},
    {"id": "tetris", "name": "Tetris Therapy", "category": "gamified", "total_sessions": 30},
    {"id": "art", "name": "Art Therapy", "category": "creative", "total_sessions": 30},
    {"id": "exposure", "name": "Exposure Therapy", "category": "behavioral", "total_sessions": 30},
    {"id": "video", "name": "Video Therapy", "category": "educational", "total_sessions": 30},
    {"id": "act", "name": "ACT", "category": "acceptance", "total_sessions": 30},
    {"id": "mood", "name": "Mood Tracking", "category": "monitoring", "total_sessions": 30},
    {"id": "sleep", "name": "Sleep Therapy", "category": "wellness", "total_sessions": 30},
]

MODULE_IDS = [m["id"] for m in THERAPY_MODULES]

# per-module activity logs (one json array per module)
ACTIVITY_KEYS = {
    "cbt": "cbt-records",
    "mindfulness": "mindfulness-sessions",
    "stress": "stress-logs",
    "gratitude": "gratitude-entries",
    "music": "music-sessions",
    "tetris": "tetris-sessions",
    "art": "art-sessions",
    "exposure": "exposure-sessions",
    "video": "video-progress",
    "act": "act-values",
    "mood": "mood-entries",
    "sleep": "sleep-entries",
}

# aggregate documents
STREAK_KEY = "streak-data"
ALL_PROGRESS_KEY = "all-patient-progress"
REPORTS_KEY = "therapist-progress-reports"
BOOKINGS_KEY = "bookings"


def progress_key(user_id: str) -> str:
    return f"therapy-progress-{user_id}"
