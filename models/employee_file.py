from models import db
from sqlalchemy.sql import func

class EmployeeFile(db.Model):
    __tablename__ = "employee_files"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id"), nullable=False, index=True)
    file_url = db.Column(db.String(500), nullable=False)
    file_type = db.Column(
        db.String(20),
        db.CheckConstraint("file_type IN ('photo', 'resume', 'document', 'certificate', 'contract')"),
        nullable=False,
    )
    file_name = db.Column(db.String(255))
    uploaded_at = db.Column(db.DateTime, server_default=func.now())

    def __repr__(self):
        return f"<EmployeeFile {self.id} - {self.file_type} for {self.employee_id}>"

    def to_dict(self):
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "file_url": self.file_url,
            "file_type": self.file_type,
            "file_name": self.file_name,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None,
        }
