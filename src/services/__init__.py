"""
Service functions for the contact form Lambda.

This package contains email composition (formatting and MIME building) and
SMTP delivery.
"""

__all__ = ['email', 'mailer']
