"""Table definitions for the event log.

event_type holds one row per registered slug and event rows reference it
by id. user and user_email belong to the host application; they are
declared here so the activity feed joins resolve and a standalone
database can be created with the same shape.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
)

metadata = MetaData()

user_table = Table(
    "user",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("first_name", String(150)),
    Column("last_name", String(150)),
    Column("profile_img", String(255)),
    Column("gender", String(20)),
)

user_email_table = Table(
    "user_email",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("user_id", Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
    Column("email", String(255), nullable=False),
    Column("is_primary", Boolean, nullable=False, default=False),
)

event_type_table = Table(
    "event_type",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("slug", String(50), nullable=False, unique=True),
    Column("label", String(150), nullable=False, default=""),
    Column("description", Text),
)

event_table = Table(
    "event",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("type_id", Integer, ForeignKey("event_type.id"), nullable=False),
    Column("url", String(300)),
    Column("data", Text),
    Column("ref", Integer),
    Column("created", DateTime, nullable=False, server_default=func.current_timestamp()),
    Column("created_by", Integer, ForeignKey("user.id", ondelete="CASCADE"), index=True),
)
