# small numeric helpers shared by progress, reports and analytics

import math


def percent_of(part: int, whole: int) -> int:
    """integer percentage rounded half up (2.5 -> 3), 0 when whole is 0"""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))
