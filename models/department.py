from models import db
from sqlalchemy.sql import func

class Department(db.Model):
    __tablename__ = "departments"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), unique=True, nullable=False)

    # Audit fields
    created_at = db.Column(db.DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Department {self.id} - {self.name}>"

    def to_dict(self):
        """Convert department to dictionary for API responses"""
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
