"""
Authentication application.

Email-based users, JWT login and the profile page data.

Key components:
    - User model: Custom email-based user authentication
    - Profile model: Name, phone, gender and birthday
    - ProfileService: Profile read/update rules

Usage:
    from authentication.models import User, Profile
    from authentication.services import ProfileService
"""
