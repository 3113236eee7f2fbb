"""
Model package.

IMPORTANT (SQLModel metadata):
- `SQLModel.metadata` is populated only when the table models are imported,
  and relationships declared by string name resolve only once every mapped
  class is registered.
- `academy.main`, the admin views and the test suite import this package, so
  it must import every `table=True` model.
"""

from academy.group.models import Group, GroupMember  # noqa: F401
from academy.program.models import Program  # noqa: F401
from academy.user.models import User  # noqa: F401
