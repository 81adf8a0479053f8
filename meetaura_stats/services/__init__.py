"""
Report pipeline services
"""
