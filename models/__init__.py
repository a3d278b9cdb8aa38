from .db import db
from .audit_log import AuditLog
from .slot import AvailabilitySlot
from .booking import Booking, STATUS_PENDING, STATUS_APPROVED, ACTIVE_STATUSES
from .shoutout_code import ShoutoutCode
