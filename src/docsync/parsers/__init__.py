"""Data models for documentation host resources."""

from .readme_models import ApiSpecification, Category, CategoryType, UploadReport

__all__ = ["ApiSpecification", "Category", "CategoryType", "UploadReport"]
