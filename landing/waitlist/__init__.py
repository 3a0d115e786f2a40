"""
Waitlist collaborators: storage, countdown clock and signup form.
"""

from .clock import CountdownClock, Elapsed
from .form import FormState, WaitlistForm
from .store import (
    InMemoryWaitlistStore,
    SupabaseWaitlistStore,
    WaitlistEntry,
    WaitlistStore,
)

__all__ = [
    'CountdownClock',
    'Elapsed',
    'FormState',
    'WaitlistForm',
    'InMemoryWaitlistStore',
    'SupabaseWaitlistStore',
    'WaitlistEntry',
    'WaitlistStore',
]
