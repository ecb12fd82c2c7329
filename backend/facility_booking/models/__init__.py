from .generated import Base, Bookings, Facilities

__all__ = ["Base", "Bookings", "Facilities"]
