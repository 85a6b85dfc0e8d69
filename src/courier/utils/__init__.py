"""src/courier/utils/__init__.py"""
