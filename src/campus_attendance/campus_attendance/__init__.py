"""Campus Attendance package.

This package is organized by feature modules (people, attendance, timetables, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
