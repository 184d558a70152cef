"""Files in the user's File Hub. nuclia_resource_id links a file to its knowledge-base resource."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, Boolean, DateTime
from edubox.database import Base


class StoredFile(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    storage_id = Column(String(128), nullable=True)
    file_name = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=True)
    category = Column(String(64), nullable=True)
    subject = Column(String(128), nullable=True)
    description = Column(Text, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    nuclia_resource_id = Column(String(128), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
