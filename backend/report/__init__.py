"""
Report export boundary for the verification demo backend.
"""
