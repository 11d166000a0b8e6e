from .degree_trig import atand, cosd, sind
from .student_coefficient import student_coefficient

__all__ = ["atand", "cosd", "sind", "student_coefficient"]
