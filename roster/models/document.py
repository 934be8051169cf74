"""
Document model
Generic keyed document table backing the roster document store
"""
from datetime import datetime


def create_document_model(db):
    """
    Factory function to create the Document model

    Args:
        db: SQLAlchemy database instance

    Returns:
        Document model class
    """

    class Document(db.Model):
        """
        One JSON document per (collection, doc_id)

        Collections used by the roster: employees, holidays, vacations,
        schedule, rotationMeta, scheduleStatus.
        """
        __tablename__ = 'documents'

        collection = db.Column(db.String(50), primary_key=True)
        doc_id = db.Column(db.String(100), primary_key=True)
        data = db.Column(db.JSON, nullable=False)
        created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
        updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

        __table_args__ = (
            db.Index('idx_documents_collection', 'collection'),
        )

        def to_dict(self):
            return {**self.data, 'id': self.doc_id}

        def __repr__(self):
            return f'<Document {self.collection}/{self.doc_id}>'

    return Document
