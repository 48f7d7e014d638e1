"""
Demo application exposing the ``student`` table.

Run with::

    CREATE_TABLES=true uvicorn modelview.demo:app
"""

from modelview.demo.entities import Base, Student
from modelview.interfaces.model_view import ModelView
from modelview.main import create_app

student_view = ModelView(Student, prefix="/student", order_by="id")

app = create_app([student_view])

__all__ = ["Base", "Student", "app", "student_view"]
