from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models to ensure they are registered with SQLAlchemy
from models.department import Department
from models.employee import Employee
from models.employee_file import EmployeeFile
