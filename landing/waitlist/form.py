"""
Waitlist signup form state.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import LandingError
from .store import WaitlistStore, normalize_email

logger = logging.getLogger(__name__)

ALREADY_REGISTERED = "You're already registered! Check your email for updates."
GENERIC_FAILURE = "Something went wrong. Please try again."

# Avatars shown in front of the overflow bubble
AVATAR_COUNT = 4


@dataclass
class FormState:
    email: str = ""
    is_loading: bool = False
    is_submitted: bool = False
    error: Optional[str] = None
    waitlist_count: int = 72


class WaitlistForm:
    """
    Email input -> submit -> loading -> error | success.

    The shown count is the stored count plus base_count; it starts at
    default_count until refresh_count() succeeds.
    """

    def __init__(self, store: WaitlistStore, base_count: int = 71, default_count: int = 72):
        self.store = store
        self.base_count = base_count
        self.state = FormState(waitlist_count=default_count)

    @property
    def can_submit(self) -> bool:
        return not self.state.is_loading and bool(self.state.email)

    @property
    def overflow_label(self) -> str:
        return f"+{self.state.waitlist_count - AVATAR_COUNT}"

    @property
    def joined_label(self) -> str:
        return f"{self.state.waitlist_count}+ people already joined"

    def set_email(self, email: str):
        self.state.email = email
        self.state.error = None

    def refresh_count(self) -> int:
        """Load the live count; failures keep the current one"""
        try:
            self.state.waitlist_count = self.store.count() + self.base_count
        except LandingError as e:
            logger.error("Error fetching waitlist count: %s", e)
        return self.state.waitlist_count

    def submit(self) -> bool:
        """
        Submit the current email.

        Returns:
            True if the email was added
        """
        email = normalize_email(self.state.email)
        if not email:
            return False

        self.state.is_loading = True
        self.state.error = None
        try:
            if self.store.exists(email):
                self.state.error = ALREADY_REGISTERED
                return False

            self.store.insert(email)
            self.state.is_submitted = True
            self.state.waitlist_count += 1
            logger.info("Email submitted to waitlist: %s", email)
            return True
        except LandingError as e:
            logger.error("Error adding to waitlist: %s", e)
            self.state.error = str(e) or GENERIC_FAILURE
            return False
        finally:
            self.state.is_loading = False
