"""
Shared building blocks used by the datasets and analytics apps.
"""
