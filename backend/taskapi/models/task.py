from sqlalchemy import Column, Integer, DateTime, Text, text
from sqlalchemy.sql import func
from taskapi.core.database import Base

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    status = Column(Text, server_default=text("'pending'"))
    created_at = Column(DateTime, server_default=func.now())
    priority = Column(Text, server_default=text("'low'"))
