class CacheKeys:
    """Well-known keys shared by every repository instance"""

    UPCOMING_CONCERTS = 'UpcomingConcerts'
