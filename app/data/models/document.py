#app/data/models/document.py
from sqlalchemy import Column, String, DateTime, JSON, Index

from app.data.database import Base


class DocumentModel(Base):
    """
    Jeden dokument magazynu dokumentow.
    path = "<collection_path>/<doc_id>", np. users/u1/orders/abc
    """
    __tablename__ = "documents"

    path = Column(String(512), primary_key=True)
    collection_path = Column(String(512), nullable=False)
    doc_id = Column(String(128), nullable=False)

    data = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_documents_collection", "collection_path"),)
