"""Application package for the PharmaCare backend.

This package contains models, services, serializers, views and route
registrations implementing the medication, donation and pharmacy API.
"""
