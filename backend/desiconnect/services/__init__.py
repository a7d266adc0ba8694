"""
Service Layer - marketplace workflows on top of the repositories
"""
