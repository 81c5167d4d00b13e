"""
ABA Coach route modules.
"""
