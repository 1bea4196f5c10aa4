"""Classroom Attendance package.

Organized by feature modules (attendance, analytics, members, ...) with a thin
Flask controller layer over service/repository layers.
"""
