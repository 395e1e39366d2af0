"""
Core models for multi-category custom fields
"""
from .base import Category, CategoryField, CategoryFieldData
