# SQLModel definitions: imported here to ensure metadata is populated for create_all.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .organization import Organization  # noqa: F401
from .membership import OrganizationMember  # noqa: F401
from .user import User  # noqa: F401
