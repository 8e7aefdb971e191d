from models import db
from sqlalchemy.sql import func

class Employee(db.Model):
    __tablename__ = "employees"
    __table_args__ = (
        db.Index("idx_employees_department", "department_id"),
        db.Index("idx_employees_hire_date", "hire_date"),
        db.Index("idx_employees_is_active", "is_active"),
    )

    id = db.Column(db.Integer, primary_key=True)

    # Personal Information
    name = db.Column(db.String(200), nullable=False)
    age = db.Column(db.Integer)
    gender = db.Column(db.String(20))
    education = db.Column(db.String(200))

    # Employment Information
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id"), nullable=False)
    position = db.Column(db.String(150))
    hire_date = db.Column(db.Date, nullable=False)
    salary = db.Column(db.Float)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    absence_days = db.Column(db.Integer, nullable=False, default=0)

    # Audit fields
    created_at = db.Column(db.DateTime, server_default=func.now())
    updated_at = db.Column(db.DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    department = db.relationship("Department", backref="employees")
    files = db.relationship("EmployeeFile", backref="employee", order_by="EmployeeFile.id")

    def __repr__(self):
        return f"<Employee {self.id} - {self.name}>"

    def to_dict(self):
        """Convert employee to dictionary for API responses, department name embedded"""
        department_name = self.department.name if self.department else None
        return {
            "id": self.id,
            "name": self.name,
            "department_id": self.department_id,
            "department": department_name,
            "department_name": department_name,
            "position": self.position,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
            "education": self.education,
            "age": self.age,
            "salary": self.salary,
            "gender": self.gender,
            "is_active": bool(self.is_active),
            "absence_days": self.absence_days,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
